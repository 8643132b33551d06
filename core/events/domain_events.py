"""Change notifications for live allocations, projects and scenarios."""
from core.events.signal import Signal


class DomainEvents:
    def __init__(self) -> None:
        self.allocations_changed: Signal[str] = Signal()  # resource_id
        self.project_changed: Signal[str] = Signal()      # project_id
        self.scenario_changed: Signal[str] = Signal()     # scenario_id
        self.scenario_promoted: Signal[str] = Signal()    # scenario_id


# SINGLE global instance
domain_events = DomainEvents()
