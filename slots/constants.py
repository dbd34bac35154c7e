# slots/constants.py
class SlotStatus:
    AVAILABLE = "AVAILABLE"
    BOOKED = "BOOKED"

    CHOICES = (
        (AVAILABLE, "Available"),
        (BOOKED, "Booked"),
    )
