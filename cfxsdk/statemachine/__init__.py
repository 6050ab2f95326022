from .statemachine import StateMachine, transition, ExceptionNullStatesInMachine, ExceptionNullInitState
