"""
Interaction core.

Components:
- ports.py: TaskRepo protocol the controller depends on
- forms.py: modal form definitions and local validation
- controller.py: DayController state machine
"""
