"""Document models for each Firestore collection."""

from heartsmiles.db.models.participant import Participant
from heartsmiles.db.models.program import Program
from heartsmiles.db.models.staff import Staff, public_staff

__all__ = ["Participant", "Program", "Staff", "public_staff"]
