from prometheus_client import Counter, Histogram


class BookingMetrics:
    """Seat reservation and booking lifecycle metrics, exposed on /metrics"""

    def __init__(self) -> None:
        self.seat_reservation_requests = Counter(
            'seat_reservation_requests_total',
            'Total seat reservation requests',
            ['bus_id', 'result'],  # result: success/conflict/locked
        )

        self.seat_reservation_duration = Histogram(
            'seat_reservation_duration_seconds',
            'Seat reservation processing time',
            ['backend'],
            buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0],
        )

        self.booking_transitions = Counter(
            'booking_transitions_total',
            'Booking status transitions',
            ['status'],  # pending/approved/rejected/expired
        )

    def record_reservation(self, *, bus_id: str, result: str) -> None:
        self.seat_reservation_requests.labels(bus_id=bus_id, result=result).inc()

    def record_transition(self, *, status: str) -> None:
        self.booking_transitions.labels(status=status).inc()


# Global singleton (prometheus collectors register once per process)
booking_metrics = BookingMetrics()
