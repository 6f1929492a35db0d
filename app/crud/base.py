from typing import Any, Dict, Generic, Optional, Type, TypeVar, Union

from pydantic import BaseModel
from sqlalchemy.orm import Session

from utils.exceptions import NotFoundError

ModelType = TypeVar("ModelType")
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    def __init__(self, model: Type[ModelType], id_field: str = "id", resource: Optional[str] = None):
        self.model = model
        self.id_field = id_field
        self.resource = resource or model.__name__

    def _query(self, db: Session):
        return db.query(self.model)

    # ---------------- GET ----------------
    def find(self, db: Session, id: Any) -> Optional[ModelType]:
        pk_column = getattr(self.model, self.id_field)
        return self._query(db).filter(pk_column == id).first()

    def get(self, db: Session, id: Any) -> ModelType:
        obj = self.find(db, id)
        if not obj:
            raise NotFoundError(self.resource)
        return obj

    # ---------------- GET ALL ----------------
    def get_all(self, db: Session, skip=0, limit=None, filters=None, order_by=None):
        query = self._query(db)
        if filters:
            for key, value in filters.items():
                if value is not None:
                    query = query.filter(getattr(self.model, key) == value)
        query = query.order_by(order_by if order_by is not None else getattr(self.model, self.id_field))
        if skip:
            query = query.offset(skip)
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def count(self, db: Session, filters=None) -> int:
        query = self._query(db)
        if filters:
            for key, value in filters.items():
                if value is not None:
                    query = query.filter(getattr(self.model, key) == value)
        return query.count()

    # ---------------- CREATE ----------------
    def create(self, db: Session, obj_in: Union[CreateSchemaType, Dict[str, Any]]) -> ModelType:
        data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump()
        obj = self.model(**data)
        db.add(obj)
        db.commit()
        db.refresh(obj)
        return obj

    # ---------------- UPDATE ----------------
    def update(self, db: Session, db_obj: ModelType, obj_in: Union[UpdateSchemaType, Dict[str, Any]]) -> ModelType:
        if not db_obj:
            raise NotFoundError(self.resource)
        update_data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump(exclude_unset=True)
        for key, value in update_data.items():
            setattr(db_obj, key, value)
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    # ---------------- DELETE ----------------
    def remove(self, db: Session, id: Any):
        obj = self.get(db, id)
        db.delete(obj)
        db.commit()
        return obj
