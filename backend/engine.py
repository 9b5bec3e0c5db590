"""
Calculator state machine.

The engine keeps no hidden state: every command is applied by the pure
function apply_command, which takes an immutable CalculatorState and returns
the next one. CalculatorEngine wraps that function for the presentation layer
(command methods, read-only projections, change subscriptions) and keeps the
command log, which is enough to rebuild any earlier state by replaying it.
"""
import logging
import re
from dataclasses import dataclass, replace
from typing import Callable, Dict, Iterable, List, Optional, Tuple, Union

from backend.numeric import BINARY_OPERATIONS, format_number, parse_number, unary_operations
from backend.settings import ANGLE_MODES, EngineSettings

logger = logging.getLogger(__name__)

EQUALS = "="
OPERATORS = ("+", "-", "×", "÷", "^", "mod")
# Functions that need a second operand arm a pending operation instead of running.
DEFERRED_FUNCTIONS = ("^", "mod")
FUNCTIONS = (
    "sin", "cos", "tan", "log", "ln", "exp", "sqrt", "pi", "e", "fact",
    "inv", "square", "cube", "10x",
) + DEFERRED_FUNCTIONS
MEMORY_OPS = ("MC", "MR", "M+", "M-")
CLEAR_OPS = ("AC", "C", "CE")

_TRAILING_NUMBER = re.compile(r"[0-9.]*$")


class CalculatorError(ValueError):
    pass


class UnknownCommandError(CalculatorError):
    pass


@dataclass(frozen=True)
class CalculatorState:
    """Snapshot of everything the calculator shows or remembers."""
    buffer: str = "0"
    pending_operand: Optional[str] = None
    pending_operator: Optional[str] = None
    fresh_entry: bool = False   # next digit replaces the buffer
    memory: float = 0.0
    history: Tuple[str, ...] = ()   # newest first
    angle_mode: str = "rad"

    @property
    def pending_expression(self) -> str:
        if self.pending_operand is None or self.pending_operator is None:
            return ""
        return f"{self.pending_operand} {self.pending_operator}"


@dataclass(frozen=True)
class Command:
    kind: str
    value: Union[str, int, None] = None


def initial_state(settings: Optional[EngineSettings] = None) -> CalculatorState:
    settings = settings or EngineSettings()
    return CalculatorState(angle_mode=settings.angle_mode)


def _push_history(state: CalculatorState, entry: str, limit: int) -> Tuple[str, ...]:
    return ((entry,) + state.history)[:limit]


# -------------------------
# Command handlers: (state, value, settings) -> state
# -------------------------
def _input_char(state: CalculatorState, char, settings: EngineSettings) -> CalculatorState:
    if not isinstance(char, str) or len(char) != 1:
        raise UnknownCommandError(f"Expected a single character, got {char!r}")

    if state.fresh_entry:
        return replace(state, buffer="0." if char == "." else char, fresh_entry=False)

    if char == "." and "." in _TRAILING_NUMBER.search(state.buffer).group():
        logger.debug("Ignoring second decimal point in %r", state.buffer)
        return state
    if state.buffer == "0" and char != ".":
        return replace(state, buffer=char)
    return replace(state, buffer=state.buffer + char)


def _select_operator(state: CalculatorState, op: str) -> CalculatorState:
    return replace(state, pending_operand=state.buffer, pending_operator=op, fresh_entry=True)


def _evaluate(state: CalculatorState, settings: EngineSettings) -> CalculatorState:
    op = state.pending_operator
    if op is None or state.pending_operand is None:
        logger.debug("Nothing pending, '=' ignored")
        return state

    prev = parse_number(state.pending_operand)
    current = parse_number(state.buffer)
    result = format_number(BINARY_OPERATIONS[op](prev, current))
    entry = f"{state.pending_operand} {op} {state.buffer} = {result}"
    logger.debug("Evaluated %s", entry)
    return replace(
        state,
        buffer=result,
        pending_operand=None,
        pending_operator=None,
        fresh_entry=True,
        history=_push_history(state, entry, settings.history_limit),
    )


def _operator(state: CalculatorState, op, settings: EngineSettings) -> CalculatorState:
    if op == EQUALS:
        return _evaluate(state, settings)
    if op not in OPERATORS:
        raise UnknownCommandError(f"Unknown operator: {op!r}")
    return _select_operator(state, op)


def _function(state: CalculatorState, func, settings: EngineSettings) -> CalculatorState:
    if func not in FUNCTIONS:
        raise UnknownCommandError(f"Unknown function: {func!r}")
    if func in DEFERRED_FUNCTIONS:
        return _select_operator(state, func)

    fn = unary_operations(state.angle_mode)[func]
    result = format_number(fn(parse_number(state.buffer)))
    entry = f"{func}({state.buffer}) = {result}"
    logger.debug("Evaluated %s", entry)
    return replace(
        state,
        buffer=result,
        fresh_entry=True,
        history=_push_history(state, entry, settings.history_limit),
    )


def _memory(state: CalculatorState, mem_op, settings: EngineSettings) -> CalculatorState:
    if mem_op == "MC":
        return replace(state, memory=0.0)
    if mem_op == "MR":
        return replace(state, buffer=format_number(state.memory))
    if mem_op == "M+":
        return replace(state, memory=BINARY_OPERATIONS["+"](state.memory, parse_number(state.buffer)))
    if mem_op == "M-":
        return replace(state, memory=BINARY_OPERATIONS["-"](state.memory, parse_number(state.buffer)))
    raise UnknownCommandError(f"Unknown memory operation: {mem_op!r}")


def _clear(state: CalculatorState, clear_op, settings: EngineSettings) -> CalculatorState:
    if clear_op == "AC":
        return replace(state, buffer="0", pending_operand=None, pending_operator=None, fresh_entry=False)
    if clear_op == "C":
        return replace(state, buffer="0")
    if clear_op == "CE":
        return replace(state, history=())
    raise UnknownCommandError(f"Unknown clear operation: {clear_op!r}")


def _recall(state: CalculatorState, index, settings: EngineSettings) -> CalculatorState:
    if not isinstance(index, int) or isinstance(index, bool):
        raise UnknownCommandError(f"History index must be an int, got {index!r}")
    if not 0 <= index < len(state.history):
        logger.warning("History index %d out of range (%d entries)", index, len(state.history))
        return state
    result = state.history[index].split(EQUALS)[-1].strip()
    return replace(state, buffer=result or "0")


def _backspace(state: CalculatorState, _value, settings: EngineSettings) -> CalculatorState:
    trimmed = state.buffer[:-1] if len(state.buffer) > 1 else "0"
    if trimmed in ("", "-"):
        trimmed = "0"
    return replace(state, buffer=trimmed)


def _angle_mode(state: CalculatorState, mode, settings: EngineSettings) -> CalculatorState:
    if mode not in ANGLE_MODES:
        logger.debug("Ignoring unknown angle mode %r", mode)
        return state
    return replace(state, angle_mode=mode)


_HANDLERS: Dict[str, Callable[[CalculatorState, object, EngineSettings], CalculatorState]] = {
    "char": _input_char,
    "operator": _operator,
    "function": _function,
    "memory": _memory,
    "clear": _clear,
    "recall": _recall,
    "backspace": _backspace,
    "angle_mode": _angle_mode,
}


def apply_command(state: CalculatorState, command: Command,
                  settings: Optional[EngineSettings] = None) -> CalculatorState:
    """
    Return the state that follows `state` after `command`.
    Numeric trouble (division by zero, log of a negative, unparsable text) never
    raises; it shows up as NaN/Infinity in the buffer. Only a command outside the
    calculator's vocabulary raises UnknownCommandError.
    """
    handler = _HANDLERS.get(command.kind)
    if handler is None:
        raise UnknownCommandError(f"Unknown command kind: {command.kind!r}")
    return handler(state, command.value, settings or EngineSettings())


# -------------------------
# Stateful facade used by the presentation layer
# -------------------------
class CalculatorEngine:
    def __init__(self, settings: Optional[EngineSettings] = None):
        self.settings = settings or EngineSettings()
        self.settings.validate()
        self._state = initial_state(self.settings)
        self._log: List[Command] = []
        self._subscribers: List[Callable[[CalculatorState], None]] = []

    @classmethod
    def replay(cls, commands: Iterable[Command],
               settings: Optional[EngineSettings] = None) -> "CalculatorEngine":
        """Build an engine by applying a command log from the initial state."""
        engine = cls(settings)
        for command in commands:
            engine.dispatch(command)
        return engine

    @property
    def state(self) -> CalculatorState:
        return self._state

    @property
    def command_log(self) -> Tuple[Command, ...]:
        return tuple(self._log)

    def subscribe(self, callback: Callable[[CalculatorState], None]) -> Callable[[], None]:
        """Call `callback` with each new state. Returns a function that unsubscribes."""
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _set_state(self, new_state: CalculatorState) -> None:
        changed = new_state != self._state
        self._state = new_state
        if changed:
            for callback in list(self._subscribers):
                callback(new_state)

    def dispatch(self, command: Command) -> CalculatorState:
        logger.debug("Command %s %r", command.kind, command.value)
        new_state = apply_command(self._state, command, self.settings)
        self._log.append(command)
        self._set_state(new_state)
        return new_state

    def undo(self) -> CalculatorState:
        """Drop the last command and rebuild the state from the remaining log."""
        if not self._log:
            return self._state
        self._log.pop()
        state = initial_state(self.settings)
        for command in self._log:
            state = apply_command(state, command, self.settings)
        self._set_state(state)
        return state

    # commands
    def submit_char(self, char: str) -> CalculatorState:
        return self.dispatch(Command("char", char))

    def submit_operator(self, op: str) -> CalculatorState:
        return self.dispatch(Command("operator", op))

    def submit_function(self, func: str) -> CalculatorState:
        return self.dispatch(Command("function", func))

    def submit_memory_op(self, mem_op: str) -> CalculatorState:
        return self.dispatch(Command("memory", mem_op))

    def submit_clear(self, clear_op: str) -> CalculatorState:
        return self.dispatch(Command("clear", clear_op))

    def submit_backspace(self) -> CalculatorState:
        return self.dispatch(Command("backspace"))

    def recall_history(self, index: int) -> CalculatorState:
        return self.dispatch(Command("recall", index))

    def clear_history(self) -> CalculatorState:
        return self.submit_clear("CE")

    def set_angle_mode(self, mode: str) -> CalculatorState:
        return self.dispatch(Command("angle_mode", mode))

    # read-only projections
    def get_display(self) -> str:
        return self._state.buffer

    def get_pending_expression(self) -> str:
        return self._state.pending_expression

    def get_memory(self) -> float:
        return self._state.memory

    def get_history(self) -> List[str]:
        return list(self._state.history)
