"""
Audit log writer and reader.
"""

import logging
from typing import List, Optional, Tuple
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import desc

from ponto.models.audit import AuditLogEntry
from ponto.exceptions import Forbidden
from ponto.utils.auth import Actor
from ponto.utils.datetime_utils import utc_now

logger = logging.getLogger(__name__)


class AuditAction:
    """Action names written to `audit_logs.action`"""
    PONTO_REGISTRADO = "ponto_registrado"
    PONTO_APROVADO = "ponto_aprovado"
    PONTO_REJEITADO = "ponto_rejeitado"
    AUSENCIA_SOLICITADA = "ausencia_solicitada"
    AUSENCIA_APROVADA = "ausencia_aprovada"
    AUSENCIA_REJEITADA = "ausencia_rejeitada"
    DISPOSITIVO_REGISTRADO = "dispositivo_registrado"
    DISPOSITIVO_AUTORIZADO = "dispositivo_autorizado"
    DISPOSITIVO_REVOGADO = "dispositivo_revogado"
    PERFIL_ATUALIZADO = "perfil_atualizado"
    USUARIO_CRIADO = "usuario_criado"
    CONFIGURACOES_ATUALIZADAS = "configuracoes_atualizadas"
    FACE_VERIFICATION_ATTEMPT = "face_verification_attempt"


class AuditLogWriter:
    """Append-only audit trail"""

    def __init__(self, db: Session):
        self.db = db

    def record(self, actor_id: str, action: str, details: Optional[dict] = None, commit: bool = False) -> AuditLogEntry:
        """
        Append an entry to the caller's transaction.

        With `commit=False` (the default) the entry commits or rolls back
        together with the primary write it accompanies.
        """
        entry = AuditLogEntry(
            user_id=actor_id,
            action=action,
            timestamp=utc_now(),
            details=details or {},
        )
        self.db.add(entry)

        if commit:
            self.db.commit()
            self.db.refresh(entry)

        return entry

    def record_best_effort(self, actor_id: str, action: str, details: Optional[dict] = None) -> Optional[AuditLogEntry]:
        """
        Append and commit an entry that is not part of a primary write.

        A failure is reported on the operational log channel and does not
        propagate to the user-facing operation.
        """
        try:
            return self.record(actor_id, action, details, commit=True)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to write audit entry {action} for {actor_id}: {e}")
            return None

    def list_entries(
        self,
        actor: Actor,
        skip: int = 0,
        limit: int = 50,
        user_id: Optional[str] = None,
        action: Optional[str] = None
    ) -> Tuple[List[AuditLogEntry], int]:
        """
        Reverse-chronological listing.

        Colaboradores only ever see their own entries; asking for someone
        else's is Forbidden.
        """
        query = self.db.query(AuditLogEntry)

        if not actor.is_reviewer:
            if user_id and user_id != actor.id:
                raise Forbidden("Permission denied to view other users' audit logs")
            query = query.filter(AuditLogEntry.user_id == actor.id)
        elif user_id:
            query = query.filter(AuditLogEntry.user_id == user_id)

        if action:
            query = query.filter(AuditLogEntry.action == action)

        total = query.count()
        entries = query.order_by(
            desc(AuditLogEntry.timestamp), desc(AuditLogEntry.id)
        ).offset(skip).limit(limit).all()

        return entries, total
