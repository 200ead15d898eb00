"""initial job costing schema

Revision ID: 4b8e1c2d9f10
Revises:
Create Date: 2026-10-18
"""

from alembic import op
import sqlalchemy as sa


revision = "4b8e1c2d9f10"
down_revision = None
branch_labels = None
depends_on = None


def _enum(name: str, *values: str) -> sa.Enum:
    return sa.Enum(*values, name=name)


def upgrade() -> None:
    op.create_table(
        "cost_codes",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("code", sa.String(length=32), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("division", sa.String(length=16), nullable=False),
        sa.Column("category", sa.String(), nullable=False),
        sa.Column("subcategory", sa.String(), nullable=True),
        sa.Column(
            "cost_type",
            _enum("costtype", "LABOR", "MATERIAL", "EQUIPMENT", "SUBCONTRACT", "OTHER"),
            nullable=False,
        ),
        sa.Column("unit", sa.String(length=32), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("is_default", sa.Boolean(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("tags_json", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ux_cost_codes_code", "cost_codes", ["code"], unique=True)
    op.create_index("idx_cost_codes_division", "cost_codes", ["division"], unique=False)

    op.create_table(
        "cost_code_budgets",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("project_id", sa.String(), nullable=False),
        sa.Column("cost_code_id", sa.String(), nullable=False),
        sa.Column("budgeted_quantity", sa.Float(), nullable=True),
        sa.Column("budgeted_unit_price", sa.Float(), nullable=True),
        sa.Column("budgeted_amount", sa.Float(), nullable=True),
        sa.Column("committed_amount", sa.Float(), nullable=True),
        sa.Column("committed_quantity", sa.Float(), nullable=True),
        sa.Column("actual_amount", sa.Float(), nullable=True),
        sa.Column("actual_quantity", sa.Float(), nullable=True),
        sa.Column("variance", sa.Float(), nullable=True),
        sa.Column("variance_percentage", sa.Float(), nullable=True),
        sa.Column("percentage_complete", sa.Float(), nullable=True),
        sa.Column(
            "status",
            _enum("budgetstatus", "UNDER_BUDGET", "ON_BUDGET", "CRITICAL", "OVER_BUDGET"),
            nullable=False,
        ),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.Column("last_calculated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["cost_code_id"], ["cost_codes.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_budgets_project", "cost_code_budgets", ["project_id"], unique=False)
    op.create_index("idx_budgets_cost_code", "cost_code_budgets", ["cost_code_id"], unique=False)
    op.create_index(
        "ux_budgets_project_cost_code",
        "cost_code_budgets",
        ["project_id", "cost_code_id"],
        unique=True,
    )

    op.create_table(
        "subcontracts",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("contract_number", sa.String(length=64), nullable=False),
        sa.Column("project_id", sa.String(), nullable=False),
        sa.Column("project_name", sa.String(), nullable=True),
        sa.Column("subcontractor_id", sa.String(), nullable=False),
        sa.Column("subcontractor_name", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("scope", sa.Text(), nullable=True),
        sa.Column("total_amount", sa.Float(), nullable=False),
        sa.Column("currency", sa.String(length=8), nullable=True),
        sa.Column("retention_percentage", sa.Float(), nullable=True),
        sa.Column("advance_payment_percentage", sa.Float(), nullable=True),
        sa.Column(
            "status",
            _enum("subcontractstatus", "DRAFT", "ACTIVE", "COMPLETED", "CANCELLED"),
            nullable=False,
        ),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("completion_date", sa.Date(), nullable=True),
        sa.Column("cost_codes_json", sa.Text(), nullable=True),
        sa.Column("total_certified", sa.Float(), nullable=True),
        sa.Column("total_paid", sa.Float(), nullable=True),
        sa.Column("total_retained", sa.Float(), nullable=True),
        sa.Column("remaining_balance", sa.Float(), nullable=True),
        sa.Column("approved_by", sa.String(), nullable=True),
        sa.Column("approved_at", sa.DateTime(), nullable=True),
        sa.Column("created_by", sa.String(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("terms", sa.Text(), nullable=True),
        sa.Column("warranty_period", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_subcontracts_project", "subcontracts", ["project_id"], unique=False)
    op.create_index("idx_subcontracts_subcontractor", "subcontracts", ["subcontractor_id"], unique=False)
    op.create_index("idx_subcontracts_status", "subcontracts", ["status"], unique=False)

    op.create_table(
        "payment_schedule_items",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("subcontract_id", sa.String(), nullable=False),
        sa.Column("sequence", sa.Integer(), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("percentage", sa.Float(), nullable=False),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column(
            "status",
            _enum("paymentitemstatus", "PENDING", "CERTIFIED", "PAID"),
            nullable=False,
        ),
        sa.Column("due_date", sa.Date(), nullable=True),
        sa.Column("certified_date", sa.DateTime(), nullable=True),
        sa.Column("paid_date", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["subcontract_id"], ["subcontracts.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_schedule_items_subcontract",
        "payment_schedule_items",
        ["subcontract_id", "sequence"],
        unique=False,
    )

    op.create_table(
        "subcontract_documents",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("subcontract_id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column(
            "document_type",
            _enum("documenttype", "CONTRACT", "QUOTE", "SPECIFICATION", "INSURANCE", "OTHER"),
            nullable=False,
        ),
        sa.Column("url", sa.String(), nullable=False),
        sa.Column("size", sa.Integer(), nullable=True),
        sa.Column("mime_type", sa.String(length=128), nullable=True),
        sa.Column("uploaded_by", sa.String(), nullable=True),
        sa.Column("upload_date", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["subcontract_id"], ["subcontracts.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_subcontract_documents_subcontract",
        "subcontract_documents",
        ["subcontract_id"],
        unique=False,
    )

    op.create_table(
        "progress_certificates",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("certificate_number", sa.String(length=64), nullable=False),
        sa.Column("subcontract_id", sa.String(), nullable=False),
        sa.Column("project_id", sa.String(), nullable=False),
        sa.Column("period_start", sa.Date(), nullable=False),
        sa.Column("period_end", sa.Date(), nullable=False),
        sa.Column("percentage_complete", sa.Float(), nullable=True),
        sa.Column("amount_certified", sa.Float(), nullable=True),
        sa.Column("retention_amount", sa.Float(), nullable=True),
        sa.Column("net_payable", sa.Float(), nullable=True),
        sa.Column("previous_certified", sa.Float(), nullable=True),
        sa.Column("cumulative_certified", sa.Float(), nullable=True),
        sa.Column(
            "status",
            _enum("certificatestatus", "DRAFT", "PENDING_APPROVAL", "APPROVED", "PAID", "REJECTED"),
            nullable=False,
        ),
        sa.Column("submitted_by", sa.String(), nullable=True),
        sa.Column("submitted_at", sa.DateTime(), nullable=False),
        sa.Column("approved_by", sa.String(), nullable=True),
        sa.Column("approved_at", sa.DateTime(), nullable=True),
        sa.Column("rejected_by", sa.String(), nullable=True),
        sa.Column("rejected_at", sa.DateTime(), nullable=True),
        sa.Column("rejection_reason", sa.Text(), nullable=True),
        sa.Column("payment_id", sa.String(), nullable=True),
        sa.Column("paid_at", sa.DateTime(), nullable=True),
        sa.Column("schedule_item_id", sa.String(), nullable=True),
        sa.Column("photos_json", sa.Text(), nullable=True),
        sa.Column("documents_json", sa.Text(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["subcontract_id"], ["subcontracts.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_certificates_subcontract", "progress_certificates", ["subcontract_id"], unique=False)
    op.create_index("idx_certificates_project", "progress_certificates", ["project_id"], unique=False)
    op.create_index("idx_certificates_status", "progress_certificates", ["status"], unique=False)

    op.create_table(
        "expenses",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("expense_number", sa.String(length=64), nullable=True),
        sa.Column("project_id", sa.String(), nullable=False),
        sa.Column("project_name", sa.String(), nullable=True),
        sa.Column("cost_code_id", sa.String(), nullable=False),
        sa.Column("supplier_id", sa.String(), nullable=False),
        sa.Column("supplier_name", sa.String(), nullable=True),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("currency", sa.String(length=8), nullable=True),
        sa.Column("tax_amount", sa.Float(), nullable=True),
        sa.Column("total_amount", sa.Float(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("invoice_number", sa.String(), nullable=True),
        sa.Column("invoice_date", sa.Date(), nullable=False),
        sa.Column("due_date", sa.Date(), nullable=True),
        sa.Column(
            "status",
            _enum("expensestatus", "DRAFT", "PENDING_APPROVAL", "APPROVED", "PAID", "REJECTED"),
            nullable=False,
        ),
        sa.Column(
            "payment_status",
            _enum("paymentstatus", "UNPAID", "PARTIAL", "PAID"),
            nullable=False,
        ),
        sa.Column("submitted_by", sa.String(), nullable=True),
        sa.Column("submitted_at", sa.DateTime(), nullable=False),
        sa.Column("approved_by", sa.String(), nullable=True),
        sa.Column("approved_at", sa.DateTime(), nullable=True),
        sa.Column("rejected_by", sa.String(), nullable=True),
        sa.Column("rejected_at", sa.DateTime(), nullable=True),
        sa.Column("rejection_reason", sa.Text(), nullable=True),
        sa.Column("is_auto_created", sa.Boolean(), nullable=False),
        sa.Column("ocr_confidence", sa.Float(), nullable=True),
        sa.Column("ocr_data_json", sa.Text(), nullable=True),
        sa.Column("needs_review", sa.Boolean(), nullable=False),
        sa.Column("attachments_json", sa.Text(), nullable=True),
        sa.Column("paid_amount", sa.Float(), nullable=True),
        sa.Column("paid_date", sa.Date(), nullable=True),
        sa.Column("payment_method", sa.String(), nullable=True),
        sa.Column("payment_reference", sa.String(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("tags_json", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_expenses_project", "expenses", ["project_id"], unique=False)
    op.create_index("idx_expenses_cost_code", "expenses", ["cost_code_id"], unique=False)
    op.create_index("idx_expenses_status", "expenses", ["status"], unique=False)

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("occurred_at", sa.DateTime(), nullable=False),
        sa.Column("action", sa.String(length=64), nullable=False),
        sa.Column("entity_type", sa.String(length=64), nullable=False),
        sa.Column("entity_id", sa.String(), nullable=False),
        sa.Column("entity_name", sa.String(), nullable=True),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("user_name", sa.String(), nullable=False),
        sa.Column("project_id", sa.String(), nullable=True),
        sa.Column("project_name", sa.String(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "severity",
            _enum("auditseverity", "INFO", "WARNING", "CRITICAL"),
            nullable=False,
        ),
        sa.Column("financial_impact_json", sa.Text(), nullable=True),
        sa.Column("changes_json", sa.Text(), nullable=True),
        sa.Column("tags_json", sa.Text(), nullable=True),
        sa.Column("metadata_json", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_audit_logs_occurred_at", "audit_logs", ["occurred_at"], unique=False)
    op.create_index("idx_audit_logs_entity", "audit_logs", ["entity_type", "entity_id"], unique=False)
    op.create_index("idx_audit_logs_project", "audit_logs", ["project_id"], unique=False)


def downgrade() -> None:
    op.drop_index("idx_audit_logs_project", table_name="audit_logs")
    op.drop_index("idx_audit_logs_entity", table_name="audit_logs")
    op.drop_index("idx_audit_logs_occurred_at", table_name="audit_logs")
    op.drop_table("audit_logs")
    op.drop_index("idx_expenses_status", table_name="expenses")
    op.drop_index("idx_expenses_cost_code", table_name="expenses")
    op.drop_index("idx_expenses_project", table_name="expenses")
    op.drop_table("expenses")
    op.drop_index("idx_certificates_status", table_name="progress_certificates")
    op.drop_index("idx_certificates_project", table_name="progress_certificates")
    op.drop_index("idx_certificates_subcontract", table_name="progress_certificates")
    op.drop_table("progress_certificates")
    op.drop_index("idx_subcontract_documents_subcontract", table_name="subcontract_documents")
    op.drop_table("subcontract_documents")
    op.drop_index("idx_schedule_items_subcontract", table_name="payment_schedule_items")
    op.drop_table("payment_schedule_items")
    op.drop_index("idx_subcontracts_status", table_name="subcontracts")
    op.drop_index("idx_subcontracts_subcontractor", table_name="subcontracts")
    op.drop_index("idx_subcontracts_project", table_name="subcontracts")
    op.drop_table("subcontracts")
    op.drop_index("ux_budgets_project_cost_code", table_name="cost_code_budgets")
    op.drop_index("idx_budgets_cost_code", table_name="cost_code_budgets")
    op.drop_index("idx_budgets_project", table_name="cost_code_budgets")
    op.drop_table("cost_code_budgets")
    op.drop_index("idx_cost_codes_division", table_name="cost_codes")
    op.drop_index("ux_cost_codes_code", table_name="cost_codes")
    op.drop_table("cost_codes")
