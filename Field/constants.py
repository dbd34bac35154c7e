# field/constants.py
class ReservationStatus:
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    EXPIRED = "expired"

    CHOICES = (
        (PENDING, "Pending"),
        (CONFIRMED, "Confirmed"),
        (CANCELLED, "Cancelled"),
        (EXPIRED, "Expired"),
    )

    # Statuses that hold a slot
    BLOCKING = (PENDING, CONFIRMED)
    TERMINAL = (CANCELLED, EXPIRED)


class SportType:
    FUTSAL = "futsal"
    BADMINTON = "badminton"
    BASKETBALL = "basketball"
    VOLLEYBALL = "volleyball"
    TENNIS = "tennis"

    CHOICES = (
        (FUTSAL, "Futsal"),
        (BADMINTON, "Badminton"),
        (BASKETBALL, "Basketball"),
        (VOLLEYBALL, "Volleyball"),
        (TENNIS, "Tennis"),
    )
