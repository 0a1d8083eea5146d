"""
Crop Lifecycle

Status of a planting: Active -> Harvested -> Closed.

DESIGN DECISION: Transitions are UNRESTRICTED. Any status may be set from
any other, including the same one and backwards (Closed -> Active), which
is how a farmer corrects a mistaken closure from the status menu.
next_status() is only the quick-action cycle; set_status() stays
available for every target.

Persisting the new status is the caller's job (see CropFlow).
"""

from vadi_hisaab.models.crop import CropRecord, CropStatus


_CYCLE = {
    CropStatus.ACTIVE: CropStatus.HARVESTED,
    CropStatus.HARVESTED: CropStatus.CLOSED,
    CropStatus.CLOSED: CropStatus.ACTIVE,
}


class CropLifecycle:
    """Status rules for crop records. Stateless."""

    @staticmethod
    def initial_status() -> CropStatus:
        return CropStatus.ACTIVE

    @staticmethod
    def set_status(current, target) -> CropStatus:
        """
        New status after a direct change.

        Both arguments accept enum members or wire strings.

        Raises:
            ValueError: Either status is not one of the three known values
        """
        CropStatus(current)
        return CropStatus(target)

    @staticmethod
    def next_status(current) -> CropStatus:
        """Quick-action cycle: Active -> Harvested -> Closed -> Active."""
        return _CYCLE[CropStatus(current)]

    def apply(self, crop: CropRecord, target) -> CropRecord:
        """Copy of `crop` with its status set to `target`."""
        return crop.model_copy(
            update={"status": self.set_status(crop.status, target)}
        )

    def advance(self, crop: CropRecord) -> CropRecord:
        return self.apply(crop, self.next_status(crop.status))
