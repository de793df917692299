from enum import Enum


class ClassroomType(str, Enum):
    REGULAR = "普通教室"
    SCIENCE = "理科室"
    MUSIC = "音楽室"
    ART = "美術室"
    GYMNASIUM = "体育館"
    COMPUTER = "コンピュータ室"
    LIBRARY = "図書室"
    COOKING = "調理室"
    TECHNOLOGY = "技術室"
    OTHER = "その他"


class RestrictionLevel(str, Enum):
    REQUIRED = "required"
    RECOMMENDED = "recommended"


# Labels stored by older front-end builds
RESTRICTION_LEVEL_LABELS = {
    "必須": RestrictionLevel.REQUIRED,
    "推奨": RestrictionLevel.RECOMMENDED,
}


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


WEEKDAYS = ["月曜", "火曜", "水曜", "木曜", "金曜"]
SATURDAY = "土曜"
