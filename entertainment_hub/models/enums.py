"""
Closed value sets for roles and statuses
"""
import enum


class AdminRole(str, enum.Enum):
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"


class CategoryStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class ItemStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    DRAFT = "draft"


def enum_values(enum_cls):
    """DBにはメンバー名ではなく値を保存する"""
    return [member.value for member in enum_cls]
