from typing import Any, Dict, Generic, List, Optional, Type, TypeVar, Union
from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel
from sqlalchemy.orm import Session
from app.core.database import Base
from datetime import datetime, timezone

ModelType = TypeVar("ModelType", bound=Base)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)

class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    def __init__(self, model: Type[ModelType]):
        self.model = model

    def get(self, db: Session, id: Any) -> Optional[ModelType]:
        query = db.query(self.model).filter(self.model.id == id)
        if hasattr(self.model, 'deleted_at'):
            query = query.filter(self.model.deleted_at == None)
        return query.first()

    def get_multi(
        self, db: Session, *, skip: int = 0, limit: int = 100
    ) -> List[ModelType]:
        query = db.query(self.model)
        if hasattr(self.model, 'deleted_at'):
            query = query.filter(self.model.deleted_at == None)
        return query.order_by(self.model.id).offset(skip).limit(limit).all()

    def create(self, db: Session, *, obj_in: Union[CreateSchemaType, Dict[str, Any]], commit: bool = True) -> ModelType:
        if isinstance(obj_in, dict):
            obj_in_data = obj_in
        else:
            obj_in_data = jsonable_encoder(obj_in)
        db_obj = self.model(**obj_in_data)
        db.add(db_obj)
        db.flush() # Populate ID
        db.refresh(db_obj) # Refresh to get ID and other defaults
        if commit:
            db.commit()
        return db_obj

    def update(
        self, db: Session, *, db_obj: ModelType, obj_in: Union[UpdateSchemaType, Dict[str, Any]], commit: bool = True
    ) -> ModelType:
        if isinstance(obj_in, dict):
            update_data = obj_in
        else:
            update_data = obj_in.model_dump(exclude_unset=True)
        for field, value in update_data.items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)
        db.add(db_obj)
        db.flush()
        if commit:
            db.commit()
            db.refresh(db_obj)
        return db_obj

    def delete(self, db: Session, *, id: int, commit: bool = True) -> Optional[ModelType]:
        obj = self.get(db, id=id)
        if not obj:
            return None

        if hasattr(self.model, 'deleted_at'):
            setattr(obj, 'deleted_at', datetime.now(timezone.utc))
            db.add(obj)
        else:
            db.delete(obj)
        db.flush()
        if commit:
            db.commit()
        return obj
