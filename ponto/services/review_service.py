"""
Approval workflow shared by every reviewable entity.

A reviewable entity has an owner (`user_id`), a reviewer-gated state column and
a list/approve/reject contract. Points and absences move
`pendente -> aprovado | rejeitado`; devices toggle `is_active`. Transitions
are a single compare-and-set UPDATE, so of two concurrent decisions only the
first to commit wins and the other sees InvalidStateTransition.
"""

import logging
from typing import Any, List, Optional, Tuple
from sqlalchemy.orm import Session
from sqlalchemy import desc

from ponto.exceptions import Forbidden, NotFound, InvalidStateTransition
from ponto.models.point import Point
from ponto.models.absence import Absence
from ponto.models.device import ActiveDevice
from ponto.schemas.absence import AbsenceCreate
from ponto.schemas.device import DeviceCreate
from ponto.schemas.review import ReviewDecision, ReviewStatus
from ponto.services.audit_service import AuditLogWriter, AuditAction
from ponto.utils.auth import Actor
from ponto.utils.datetime_utils import utc_now

logger = logging.getLogger(__name__)


class ReviewWorkflow:
    """Generic reviewer-gated state machine over one model"""

    model = None
    state_field = "status"
    label = "Item"
    audit_actions = {}

    def __init__(self, db: Session):
        self.db = db
        self.audit = AuditLogWriter(db)

    # State machine definition

    def required_state(self, decision: ReviewDecision) -> Any:
        """State the item must be in for `decision` to apply"""
        return ReviewStatus.PENDENTE.value

    def target_state(self, decision: ReviewDecision) -> Any:
        return decision.value

    # Contract

    def list_items(self, actor: Actor, state: Any = None, user_id: Optional[str] = None) -> Tuple[List[Any], int]:
        """Items visible to `actor`: own items for colaborador, all for reviewers"""
        query = self.db.query(self.model)

        if not actor.is_reviewer:
            if user_id and user_id != actor.id:
                raise Forbidden(f"Permission denied to view other users' {self.label.lower()}s")
            query = query.filter(self.model.user_id == actor.id)
        elif user_id:
            query = query.filter(self.model.user_id == user_id)

        if state is not None:
            query = query.filter(getattr(self.model, self.state_field) == state)

        total = query.count()
        items = query.order_by(desc(self.order_column())).all()
        return items, total

    def approve(self, actor: Actor, item_id: str) -> Any:
        return self.transition(actor, item_id, ReviewDecision.APROVADO)

    def reject(self, actor: Actor, item_id: str) -> Any:
        return self.transition(actor, item_id, ReviewDecision.REJEITADO)

    def transition(self, actor: Actor, item_id: str, decision: ReviewDecision) -> Any:
        """
        Apply a reviewer decision.

        Args:
            actor: Reviewer
            item_id: Id of the item
            decision: aprovado or rejeitado

        Returns:
            The updated item

        Raises:
            Forbidden: If the actor is not gestor/admin
            NotFound: If the item does not exist
            InvalidStateTransition: If the item is not in the required state,
                including when another reviewer decided it first
        """
        if not actor.is_reviewer:
            raise Forbidden("Forbidden: Only managers and admins can review.")

        item = self._get(item_id)
        state_column = getattr(self.model, self.state_field)
        required = self.required_state(decision)

        updated = self.db.query(self.model).filter(
            self.model.id == item_id,
            state_column == required
        ).update({
            self.state_field: self.target_state(decision),
            "reviewed_by": actor.id,
            "reviewed_at": utc_now(),
        }, synchronize_session=False)

        if updated == 0:
            self.db.rollback()
            self.db.refresh(item)
            current = getattr(item, self.state_field)
            raise InvalidStateTransition(
                f"{self.label} {item_id} already decided (current state: {current}); "
                f"cannot apply '{decision.value}'"
            )

        action = self.audit_actions.get(decision)
        if action:
            self.audit.record(actor.id, action, {
                "item_id": item_id,
                "owner_id": item.user_id,
                "decision": decision.value,
            })

        self.db.commit()
        self.db.refresh(item)

        logger.info(f"{self.label} {item_id} -> {getattr(item, self.state_field)} by {actor.id}")
        return item

    def _get(self, item_id: str) -> Any:
        item = self.db.query(self.model).filter(self.model.id == item_id).first()
        if item is None:
            raise NotFound(f"{self.label} not found")
        return item

    def order_column(self):
        return self.model.created_at


class PointReviewWorkflow(ReviewWorkflow):
    model = Point
    label = "Point"
    audit_actions = {
        ReviewDecision.APROVADO: AuditAction.PONTO_APROVADO,
        ReviewDecision.REJEITADO: AuditAction.PONTO_REJEITADO,
    }

    def order_column(self):
        return Point.timestamp


class AbsenceWorkflow(ReviewWorkflow):
    model = Absence
    label = "Absence"
    audit_actions = {
        ReviewDecision.APROVADO: AuditAction.AUSENCIA_APROVADA,
        ReviewDecision.REJEITADO: AuditAction.AUSENCIA_REJEITADA,
    }

    def request(self, actor: Actor, data: AbsenceCreate) -> Absence:
        """Create a pending absence request owned by `actor`"""
        absence = Absence(
            user_id=actor.id,
            type=data.type.value,
            start_date=data.start_date,
            end_date=data.end_date,
            reason=data.reason,
            status=ReviewStatus.PENDENTE.value,
        )
        self.db.add(absence)
        self.db.flush()

        self.audit.record(actor.id, AuditAction.AUSENCIA_SOLICITADA, {
            "absence_id": absence.id,
            "type": absence.type,
            "start_date": data.start_date.isoformat(),
            "end_date": data.end_date.isoformat(),
        })
        self.db.commit()
        self.db.refresh(absence)
        return absence


class DeviceWorkflow(ReviewWorkflow):
    """
    Device authorization: approve turns an inactive device on, reject turns an
    active one off. Neither state is terminal, a revoked device can be
    authorized again.
    """

    model = ActiveDevice
    state_field = "is_active"
    label = "Device"
    audit_actions = {
        ReviewDecision.APROVADO: AuditAction.DISPOSITIVO_AUTORIZADO,
        ReviewDecision.REJEITADO: AuditAction.DISPOSITIVO_REVOGADO,
    }

    def required_state(self, decision: ReviewDecision) -> bool:
        return decision == ReviewDecision.REJEITADO

    def target_state(self, decision: ReviewDecision) -> bool:
        return decision == ReviewDecision.APROVADO

    def order_column(self):
        return ActiveDevice.last_login

    def register(self, actor: Actor, data: DeviceCreate) -> ActiveDevice:
        """Register (or refresh) a device for `actor`; new devices start inactive"""
        device = self.db.query(ActiveDevice).filter(
            ActiveDevice.user_id == actor.id,
            ActiveDevice.device_id == data.device_id
        ).first()

        if device is not None:
            device.last_login = utc_now()
            if data.device_model:
                device.device_model = data.device_model
            self.db.commit()
            self.db.refresh(device)
            return device

        device = ActiveDevice(
            user_id=actor.id,
            device_id=data.device_id,
            device_model=data.device_model,
            last_login=utc_now(),
            is_active=False,
        )
        self.db.add(device)
        self.db.flush()

        self.audit.record(actor.id, AuditAction.DISPOSITIVO_REGISTRADO, {
            "device_id": data.device_id,
            "device_model": data.device_model,
        })
        self.db.commit()
        self.db.refresh(device)
        return device
