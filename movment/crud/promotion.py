# movment/crud/promotion.py
from typing import Any, Dict, Optional
from sqlalchemy import select
from sqlalchemy.orm import Session
from movment.crud.base import CRUDBase
from movment.models.promotion import Promotion
from movment.schemas.promotion import PromotionIn, PromotionUpdate

class CRUDPromotion(CRUDBase[Promotion, PromotionIn, PromotionUpdate]):
    def create(self, db: Session, obj_in: PromotionIn, extra: Dict[str, Any] | None=None) -> Promotion:
        obj_in = obj_in.model_copy(update={"code": obj_in.code.strip().upper()})
        return super().create(db, obj_in, extra)

    def get_by_code(self, db: Session, code: str) -> Optional[Promotion]:
        return db.scalar(select(Promotion).where(Promotion.code == code.strip().upper()))

promotion_crud = CRUDPromotion(Promotion)
