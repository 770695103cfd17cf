import enum


class RoleName(str, enum.Enum):
    OWNER   = "owner"
    PARTNER = "partner"


# Roles allowed to manage the catalog (vehicles, images, fuels)
STAFF_ROLES = (RoleName.OWNER, RoleName.PARTNER)
