"""
Profile reads, user provisioning by a gestor/admin, a user renaming
themselves and a gestor/admin changing someone's role.
"""

import logging
from typing import Optional
from sqlalchemy import or_
from sqlalchemy.orm import Session

from ponto.exceptions import Forbidden, NotFound, ValidationError
from ponto.models.profile import Profile
from ponto.schemas.profile import Role, ProfileCreate, ProfileNameUpdate
from ponto.services.audit_service import AuditLogWriter, AuditAction
from ponto.utils.auth import Actor
from ponto.utils.validators import sanitize_input

logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 100


class ProfileService:
    def __init__(self, db: Session):
        self.db = db
        self.audit = AuditLogWriter(db)

    def get_profile(self, profile_id: str) -> Profile:
        profile = self.db.query(Profile).filter(Profile.id == profile_id).first()
        if profile is None:
            raise NotFound("Profile not found")
        return profile

    def ensure_profile(
        self,
        profile_id: str,
        email: Optional[str] = None,
        first_name: Optional[str] = None,
        role: Role = Role.COLABORADOR
    ) -> Profile:
        """
        Create the profile for an identity-provider user if it does not exist.

        Mirrors the provider's signup trigger; existing profiles are returned
        untouched.
        """
        profile = self.db.query(Profile).filter(Profile.id == profile_id).first()
        if profile is not None:
            return profile

        profile = Profile(id=profile_id, email=email, first_name=first_name, role=role.value)
        self.db.add(profile)
        self.db.commit()
        self.db.refresh(profile)

        logger.info(f"Created profile {profile_id} ({role.value})")
        return profile

    def create_profile(self, actor: Actor, data: ProfileCreate) -> Profile:
        """
        Provision a user on behalf of a gestor/admin.

        Raises:
            Forbidden: If the actor is not gestor/admin, or a gestor tries to
                create an admin
            ValidationError: If the id or email is already taken
        """
        if not actor.is_reviewer:
            raise Forbidden("Forbidden: Only managers and admins can create users.")

        if data.role == Role.ADMIN and actor.role != Role.ADMIN:
            raise Forbidden("Forbidden: Only admins can grant or revoke the admin role.")

        email = data.email.lower()
        conditions = [Profile.email == email]
        if data.id:
            conditions.append(Profile.id == data.id)
        if self.db.query(Profile).filter(or_(*conditions)).first() is not None:
            raise ValidationError("A user with this id or email already exists", "email")

        first_name = sanitize_input(data.first_name)
        if not first_name:
            raise ValidationError("first_name is required", "first_name")

        profile = Profile(
            email=email,
            first_name=first_name,
            last_name=sanitize_input(data.last_name) or None,
            role=data.role.value,
        )
        if data.id:
            profile.id = data.id
        self.db.add(profile)
        self.db.flush()

        self.audit.record(actor.id, AuditAction.USUARIO_CRIADO, {
            "new_user_id": profile.id,
            "role": profile.role,
            "email": email,
        })
        self.db.commit()
        self.db.refresh(profile)

        logger.info(f"User {profile.id} ({profile.role}) created by {actor.id}")
        return profile

    def update_name(self, actor: Actor, data: ProfileNameUpdate) -> Profile:
        """Update the actor's own first/last name"""
        profile = self.get_profile(actor.id)
        changes = {}

        for field in ("first_name", "last_name"):
            value = getattr(data, field)
            if value is None:
                continue
            value = sanitize_input(value)
            if len(value) > MAX_NAME_LENGTH:
                raise ValidationError(f"{field} exceeds {MAX_NAME_LENGTH} characters", field)
            setattr(profile, field, value)
            changes[field] = value

        if changes:
            self.audit.record(actor.id, AuditAction.PERFIL_ATUALIZADO, {"profile_id": profile.id, **changes})
            self.db.commit()
            self.db.refresh(profile)

        return profile

    def update_role(self, actor: Actor, target_id: str, role: Role) -> Profile:
        """
        Change another profile's role.

        Raises:
            Forbidden: If the actor is not gestor/admin, or a gestor tries to
                grant or revoke admin
            NotFound: If the target profile does not exist
        """
        if not actor.is_reviewer:
            raise Forbidden("Forbidden: Only managers and admins can change roles.")

        profile = self.get_profile(target_id)
        previous = profile.role

        if actor.role != Role.ADMIN and Role.ADMIN.value in (previous, role.value):
            raise Forbidden("Forbidden: Only admins can grant or revoke the admin role.")

        profile.role = role.value
        self.audit.record(actor.id, AuditAction.PERFIL_ATUALIZADO, {
            "profile_id": profile.id,
            "role": {"from": previous, "to": role.value},
        })
        self.db.commit()
        self.db.refresh(profile)

        logger.info(f"Role of {target_id} changed {previous} -> {role.value} by {actor.id}")
        return profile
