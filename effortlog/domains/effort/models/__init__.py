from effortlog.domains.effort.models.effort_entry import EffortEntry

__all__ = ["EffortEntry"]
