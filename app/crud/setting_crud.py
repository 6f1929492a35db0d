from typing import Optional

from sqlalchemy.orm import Session

from crud.base import CRUDBase
from model import Setting


class CRUDSetting(CRUDBase[Setting, None, None]):
    def get_value(self, db: Session, key: str) -> Optional[str]:
        row = db.query(Setting).filter(Setting.key == key).first()
        return row.value if row else None

    def set_value(self, db: Session, key: str, value: str) -> Setting:
        row = db.query(Setting).filter(Setting.key == key).first()
        if row:
            row.value = value
        else:
            row = Setting(key=key, value=value)
            db.add(row)
        db.commit()
        db.refresh(row)
        return row


setting_crud = CRUDSetting(Setting)
