# movment/crud/base.py
from typing import TypeVar, Generic, Type, Any, Optional, List, Dict
from sqlalchemy import select
from sqlalchemy.orm import Session
from pydantic import BaseModel
from movment.core.errors import NotFound
from movment.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)
CreateSchema = TypeVar("CreateSchema", bound=BaseModel)
UpdateSchema = TypeVar("UpdateSchema", bound=BaseModel)

class CRUDBase(Generic[ModelType, CreateSchema, UpdateSchema]):
    """Plain table access for the catalogue-style rows (resources, promotions, users)."""

    def __init__(self, model: Type[ModelType], not_found: str = "Not found"):
        self.model = model
        self.not_found = not_found

    def get(self, db: Session, id: Any) -> Optional[ModelType]:
        return db.get(self.model, id)

    def get_or_404(self, db: Session, id: Any) -> ModelType:
        obj = db.get(self.model, id)
        if obj is None:
            raise NotFound(self.not_found)
        return obj

    def get_multi(self, db: Session, *filters, skip=0, limit=100, order_by=None) -> List[ModelType]:
        stmt = select(self.model).where(*filters)
        if order_by is not None:
            stmt = stmt.order_by(order_by)
        return list(db.scalars(stmt.offset(skip).limit(limit)).all())

    def create(self, db: Session, obj_in: CreateSchema, extra: Dict[str, Any] | None = None) -> ModelType:
        data = obj_in.model_dump()
        if extra:
            data.update(extra)
        obj = self.model(**data)
        db.add(obj); db.commit(); db.refresh(obj)
        return obj

    def update(self, db: Session, db_obj: ModelType, obj_in: UpdateSchema | Dict[str, Any]) -> ModelType:
        # only fields the client actually sent; explicit nulls are skipped for non-nullable columns
        data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump(exclude_unset=True)
        for field, value in data.items():
            col = self.model.__mapper__.columns.get(field)
            if value is None and col is not None and not col.nullable:
                continue
            setattr(db_obj, field, value)
        db.commit(); db.refresh(db_obj)
        return db_obj

    def delete(self, db: Session, db_obj: ModelType) -> None:
        db.delete(db_obj); db.commit()
