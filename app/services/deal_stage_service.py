"""Pipeline stage service, including the default stage set."""

from __future__ import annotations

import logging
from typing import Any

from app.core.exceptions import ConflictError, ValidationError
from app.models import Deal, DealStage
from app.services.base_service import BaseService

logger = logging.getLogger(__name__)

DEFAULT_STAGES: tuple[tuple[str, str], ...] = (
    ("Lead", "#6B7280"),
    ("Qualified", "#3B82F6"),
    ("Proposal", "#F59E0B"),
    ("Negotiation", "#EF4444"),
    ("Closed Won", "#10B981"),
    ("Closed Lost", "#6B7280"),
)


def is_won_stage(name: str | None) -> bool:
    return "won" in (name or "").lower()


def is_lost_stage(name: str | None) -> bool:
    return "lost" in (name or "").lower()


class DealStageService(BaseService):
    """Service for ordered deal stages."""

    def list_stages(self, initialize: bool = True) -> list[DealStage]:
        """Return stages by order; an empty pipeline gets the default stages."""
        stages = self.db.query(DealStage).order_by(DealStage.order_index, DealStage.id).all()
        if not stages and initialize:
            return self.initialize_default_stages()
        return stages

    def get_stage(self, stage_id: int) -> DealStage | None:
        return self.db.query(DealStage).filter(DealStage.id == stage_id).first()

    def initialize_default_stages(self) -> list[DealStage]:
        existing = self.db.query(DealStage).order_by(DealStage.order_index, DealStage.id).all()
        if existing:
            return existing
        stages = [
            DealStage(name=name, color=color, order_index=index, is_default=True)
            for index, (name, color) in enumerate(DEFAULT_STAGES, start=1)
        ]
        self.db.add_all(stages)
        self.commit()
        logger.info("stages.defaults.created", extra={"event": "stages.defaults.created", "count": len(stages)})
        return stages

    def create_stage(self, data: dict[str, Any]) -> DealStage:
        payload = dict(data)
        if payload.get("order_index") is None:
            last = self.db.query(DealStage).order_by(DealStage.order_index.desc()).first()
            payload["order_index"] = (last.order_index + 1) if last else 1
        return self.save(DealStage(**payload))

    def update_stage(self, stage_id: int, changes: dict[str, Any]) -> DealStage | None:
        stage = self.get_stage(stage_id)
        if stage is None:
            return None
        self.apply_changes(stage, changes)
        self.commit()
        self.db.refresh(stage)
        return stage

    def delete_stage(self, stage_id: int) -> bool:
        stage = self.get_stage(stage_id)
        if stage is None:
            return False
        in_use = self.db.query(Deal).filter(Deal.stage_id == stage_id).count()
        if in_use:
            raise ConflictError(f"Stage {stage_id} is used by {in_use} deal(s).")
        self.remove(stage)
        return True

    def reorder_stages(self, stage_ids: list[int]) -> list[DealStage]:
        """Assign order indexes 1..n following the given id sequence."""
        if len(set(stage_ids)) != len(stage_ids):
            raise ValidationError("Stage ids must not repeat.")
        stages = {stage.id: stage for stage in self.db.query(DealStage).filter(DealStage.id.in_(stage_ids)).all()}
        missing = [stage_id for stage_id in stage_ids if stage_id not in stages]
        if missing:
            raise ValidationError(f"Unknown stage ids: {', '.join(str(item) for item in missing)}")
        for index, stage_id in enumerate(stage_ids, start=1):
            stages[stage_id].order_index = index
        self.commit()
        return self.list_stages(initialize=False)
