from grouproster.app.models.parent import Parent
from grouproster.app.models.reservation_slot import ReservationSlot
from grouproster.app.models.group_pass import GroupPass
from grouproster.app.models.invite_link import InviteLink
from grouproster.app.models.child import Child
from grouproster.app.models.group_member import GroupMember

__all__ = ["Parent", "ReservationSlot", "GroupPass", "InviteLink", "Child", "GroupMember"]
