from grouproster.app.db.base_class import Base

# Import models to register metadata for Base.metadata.create_all in tests
from grouproster.app.models.parent import Parent  # noqa: F401
from grouproster.app.models.reservation_slot import ReservationSlot  # noqa: F401
from grouproster.app.models.group_pass import GroupPass  # noqa: F401
from grouproster.app.models.invite_link import InviteLink  # noqa: F401
from grouproster.app.models.child import Child  # noqa: F401
from grouproster.app.models.group_member import GroupMember  # noqa: F401
