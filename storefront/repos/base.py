from typing import Any, Generic, List, Optional, Type, TypeVar

from sqlalchemy.orm import Session

from storefront.core.exceptions import RecordNotFound
from storefront.db.base_class import Base

ModelT = TypeVar("ModelT", bound=Base)


class Repository(Generic[ModelT]):
    """Data access for one mapped model.

    Repositories flush but never commit; the request handler owns the
    transaction.
    """

    def __init__(self, db: Session, model: Type[ModelT]):
        self.db = db
        self.model = model

    def get(self, record_id: Any) -> Optional[ModelT]:
        if record_id is None:
            return None
        return self.db.get(self.model, record_id)

    def get_or_raise(self, record_id: Any) -> ModelT:
        record = self.get(record_id)
        if record is None:
            raise RecordNotFound(self.model.__name__, id=record_id)
        return record

    def find_by(self, **criteria: Any) -> Optional[ModelT]:
        return self.db.query(self.model).filter_by(**criteria).first()

    def list(self, *order_by: Any) -> List[ModelT]:
        query = self.db.query(self.model)
        return query.order_by(*(order_by or (self.model.id,))).all()

    def count(self) -> int:
        return self.db.query(self.model).count()

    def save(self, record: ModelT) -> ModelT:
        self.db.add(record)
        self.db.flush()
        return record

    def delete(self, record: ModelT) -> None:
        self.db.delete(record)
        self.db.flush()
