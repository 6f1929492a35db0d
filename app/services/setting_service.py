from sqlalchemy.orm import Session

from crud.setting_crud import setting_crud

RESTAURANT_NAME_KEY = "restaurant_name"
DEFAULT_RESTAURANT_NAME = "Restaurant"


class SettingService:
    def get_restaurant_name(self, db: Session) -> str:
        return setting_crud.get_value(db, RESTAURANT_NAME_KEY) or DEFAULT_RESTAURANT_NAME

    def set_restaurant_name(self, db: Session, name: str) -> str:
        return setting_crud.set_value(db, RESTAURANT_NAME_KEY, name).value
