from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.orm import Session

from core.events.domain_events import domain_events
from core.exceptions import BusinessRuleError, NotFoundError, ValidationError
from core.interfaces import CostCodeBudgetRepository, CostCodeRepository
from core.models import CostCode, CostType
from core.services.audit.helpers import record_audit
from core.services.cost_code.catalog import DEFAULT_COST_CODES
from core.services.cost_code.hierarchy import CostCodeHierarchy, build_hierarchy
from core.services.cost_code.models import CostCodeQueryResult, CostCodeStats
from core.services.cost_code.suggest import rank_cost_codes


logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = (
    "name",
    "description",
    "division",
    "category",
    "subcategory",
    "cost_type",
    "unit",
    "is_active",
    "is_default",
    "notes",
    "tags",
)


class CostCodeCatalogMixin:
    _session: Session
    _cost_code_repo: CostCodeRepository
    _budget_repo: CostCodeBudgetRepository

    def initialize_catalog(self) -> int:
        """Seed the default catalog into an empty table. Returns rows added."""
        if self._cost_code_repo.count() > 0:
            return 0
        codes = [CostCode.create(**entry) for entry in DEFAULT_COST_CODES]
        try:
            for cost_code in codes:
                self._cost_code_repo.add(cost_code)
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e
        logger.info("Seeded %s default cost codes", len(codes))
        return len(codes)

    def create_cost_code(
        self,
        code: str,
        name: str,
        description: str,
        division: str,
        category: str,
        subcategory: Optional[str] = None,
        cost_type: CostType = CostType.OTHER,
        unit: str = "global",
        is_active: bool = True,
        is_default: bool = False,
        notes: Optional[str] = None,
        tags: Optional[list[str]] = None,
    ) -> CostCode:
        code = (code or "").strip()
        if not code:
            raise ValidationError("Cost code is required.", code="REQUIRED_FIELD")
        if not (name or "").strip():
            raise ValidationError("Cost code name is required.", code="REQUIRED_FIELD")
        if self._cost_code_repo.get_by_code(code) is not None:
            raise ValidationError(f"Cost code {code} already exists", code="DUPLICATE_CODE")

        cost_code = CostCode.create(
            code=code,
            name=name.strip(),
            description=description or "",
            division=division,
            category=category,
            subcategory=subcategory,
            cost_type=CostType(cost_type),
            unit=unit,
            is_active=is_active,
            is_default=is_default,
            notes=notes,
            tags=tags,
        )
        try:
            self._cost_code_repo.add(cost_code)
            record_audit(
                self,
                "cost_code_created",
                entity_type="cost_code",
                entity_id=cost_code.id,
                entity_name=cost_code.code,
                description=f"Cost code {cost_code.code} created",
            )
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e

        domain_events.cost_codes_changed.emit(cost_code.id)
        return cost_code

    def get_cost_code(self, cost_code_id: str) -> CostCode | None:
        return self._cost_code_repo.get(cost_code_id)

    def get_cost_code_by_code(self, code: str) -> CostCode | None:
        return self._cost_code_repo.get_by_code(code)

    def require_cost_code(self, cost_code_id: str) -> CostCode:
        cost_code = self._cost_code_repo.get(cost_code_id)
        if cost_code is None:
            raise NotFoundError("Cost code not found", code="COST_CODE_NOT_FOUND")
        return cost_code

    def update_cost_code(self, cost_code_id: str, **changes) -> CostCode:
        cost_code = self.require_cost_code(cost_code_id)
        unknown = set(changes) - set(_EDITABLE_FIELDS)
        if unknown:
            raise ValidationError(
                f"Unknown cost code fields: {', '.join(sorted(unknown))}",
                code="INVALID_FIELD",
            )
        for field_name, value in changes.items():
            if field_name == "cost_type":
                value = CostType(value)
            elif field_name == "tags":
                value = list(value or [])
            setattr(cost_code, field_name, value)
        cost_code.updated_at = datetime.now(timezone.utc)

        try:
            self._cost_code_repo.update(cost_code)
            record_audit(
                self,
                "cost_code_updated",
                entity_type="cost_code",
                entity_id=cost_code.id,
                entity_name=cost_code.code,
                description=f"Cost code {cost_code.code} updated",
                metadata={"fields": sorted(changes)},
            )
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e

        domain_events.cost_codes_changed.emit(cost_code.id)
        return cost_code

    def delete_cost_code(self, cost_code_id: str) -> None:
        cost_code = self.require_cost_code(cost_code_id)
        if self._budget_repo.list_by_cost_code(cost_code_id):
            raise BusinessRuleError(
                "Cannot delete cost code that is used in project budgets",
                code="NOT_DELETABLE",
            )
        try:
            self._cost_code_repo.delete(cost_code_id)
            record_audit(
                self,
                "cost_code_deleted",
                entity_type="cost_code",
                entity_id=cost_code_id,
                entity_name=cost_code.code,
                description=f"Cost code {cost_code.code} deleted",
            )
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e

        domain_events.cost_codes_changed.emit(cost_code_id)

    def list_cost_codes(self) -> List[CostCode]:
        return self._cost_code_repo.list_all()

    def list_active_cost_codes(self) -> List[CostCode]:
        return [cc for cc in self._cost_code_repo.list_all() if cc.is_active]

    def query_cost_codes(
        self,
        division: str | None = None,
        category: str | None = None,
        cost_type: CostType | None = None,
        is_active: bool | None = None,
        search: str | None = None,
        tags: list[str] | None = None,
    ) -> CostCodeQueryResult:
        rows = self._cost_code_repo.list_all()
        if division:
            rows = [cc for cc in rows if cc.division == division]
        if category:
            rows = [cc for cc in rows if cc.category == category]
        if cost_type is not None:
            rows = [cc for cc in rows if cc.cost_type == CostType(cost_type)]
        if is_active is not None:
            rows = [cc for cc in rows if cc.is_active == is_active]
        if search:
            needle = search.lower()
            rows = [
                cc
                for cc in rows
                if needle in cc.code.lower()
                or needle in cc.name.lower()
                or needle in cc.description.lower()
            ]
        if tags:
            rows = [cc for cc in rows if any(tag in cc.tags for tag in tags)]
        return CostCodeQueryResult(data=rows, total=len(rows), hierarchy=build_hierarchy(rows))

    def suggest_cost_codes(self, description: str, limit: int = 5) -> List[CostCode]:
        return rank_cost_codes(self.list_active_cost_codes(), description or "", limit)

    def get_cost_code_hierarchy(self) -> CostCodeHierarchy:
        return build_hierarchy(self.list_active_cost_codes())

    def get_cost_code_stats(self) -> CostCodeStats:
        rows = self._cost_code_repo.list_all()
        by_type = {cost_type.value: 0 for cost_type in CostType}
        by_division: dict[str, int] = {}
        for cc in rows:
            by_type[cc.cost_type.value] += 1
            by_division[cc.division] = by_division.get(cc.division, 0) + 1
        active = sum(1 for cc in rows if cc.is_active)
        return CostCodeStats(
            total=len(rows),
            active=active,
            inactive=len(rows) - active,
            by_type=by_type,
            by_division=by_division,
        )


__all__ = ["CostCodeCatalogMixin"]
