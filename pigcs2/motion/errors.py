class LimitViolation(ValueError):
  """A command was refused because it would take an axis outside its configured limits."""
