from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.security import CurrentUser
from app.models.field import Field
from app.repository import field_repository
from app.schemas.field import FieldCreate, FieldUpdate

logger = logging.getLogger(__name__)


class FieldService:
    def __init__(self, db: Session):
        self.db = db

    def list_fields(
        self,
        *,
        city: Optional[str] = None,
        sport_type: Optional[str] = None,
        owner_id: Optional[int] = None,
    ) -> List[Field]:
        return field_repository.list_fields(
            self.db,
            city=city,
            sport_type=sport_type,
            owner_id=owner_id,
        )

    def get_field(self, field_id: int) -> Field:
        field = field_repository.get_field(self.db, field_id)
        if field is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Field not found",
            )
        return field

    def ensure_can_manage(self, field: Field, current_user: CurrentUser) -> None:
        if field.id_owner != current_user.id_user and not current_user.is_admin:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Forbidden: You can only manage your own fields",
            )

    def create_field(self, field_in: FieldCreate, *, owner_id: int) -> Field:
        field_data = field_in.model_dump(exclude={"working_hours"})
        field_data["sport_type"] = field_in.sport_type.value
        field = Field(
            **field_data,
            working_hours=field_in.working_hours.to_storage() if field_in.working_hours else None,
            id_owner=owner_id,
        )

        try:
            field_repository.create_field(self.db, field)
            self.db.commit()
            self.db.refresh(field)
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Failed to create field %r", field_in.field_name)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to create field",
            ) from exc

        logger.info("Field %s created by owner %s", field.id_field, owner_id)
        return field

    def update_field(
        self,
        field_id: int,
        field_in: FieldUpdate,
        *,
        current_user: CurrentUser,
    ) -> Field:
        field = self.get_field(field_id)
        self.ensure_can_manage(field, current_user)

        update_data = field_in.model_dump(exclude_unset=True, exclude={"working_hours"})
        if update_data.get("sport_type") is not None:
            update_data["sport_type"] = field_in.sport_type.value
        if "working_hours" in field_in.model_fields_set:
            update_data["working_hours"] = (
                field_in.working_hours.to_storage() if field_in.working_hours else None
            )

        for attr, value in update_data.items():
            if value is None and attr != "working_hours":
                continue
            setattr(field, attr, value)

        try:
            self.db.flush()
            self.db.commit()
            self.db.refresh(field)
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Failed to update field %s", field_id)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to update field",
            ) from exc

        return field

    def delete_field(self, field_id: int, *, current_user: CurrentUser) -> None:
        """Remove the field together with its bookings and reviews."""

        field = self.get_field(field_id)
        if field.id_owner != current_user.id_user and not current_user.is_admin:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Forbidden: You can only delete your own fields",
            )

        try:
            field_repository.delete_field(self.db, field)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Failed to delete field %s", field_id)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to delete field",
            ) from exc

        logger.info("Field %s deleted by user %s", field_id, current_user.id_user)
