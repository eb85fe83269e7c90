from enum import Enum
from typing import List, Optional, Dict, Iterator, Tuple
from dataclasses import dataclass, field
from datetime import datetime
from threading import Lock


# Highest to lowest; the smallest note sets the minimum dispensable amount
DEFAULT_DENOMINATIONS: List[Tuple[int, int]] = [
    (1000, 10),
    (500, 10),
    (100, 10),
]


# ==================== Enums ====================

class DispenseStatus(Enum):
    """Outcome of a top-level dispense request"""
    SUCCESS = "SUCCESS"
    REJECTED = "REJECTED"
    INSUFFICIENT_NOTES = "INSUFFICIENT_NOTES"


# ==================== Core Models ====================

@dataclass
class DispenseResult:
    """Result of a dispense attempt: success flag and notes per denomination"""
    success: bool
    notes_dispensed: Dict[int, int] = field(default_factory=dict)

    def get_total_value(self) -> int:
        return sum(value * count for value, count in self.notes_dispensed.items())


@dataclass
class DispenseRecord:
    """History entry for a top-level dispense request"""
    record_id: str
    amount: int
    status: DispenseStatus
    notes_dispensed: Dict[int, int]
    timestamp: datetime

    def __repr__(self) -> str:
        return f"DispenseRecord({self.record_id}, {self.status.value}, {self.amount})"


def _validate_amount(amount) -> None:
    # bool is an int subclass but never a meaningful amount
    if not isinstance(amount, int) or isinstance(amount, bool):
        raise TypeError(f"Amount must be an integer, got {type(amount).__name__}")


# ==================== Chain of Responsibility: Note Handlers ====================

class NoteHandler:
    """
    Handles a single denomination in the dispensing chain.

    Covers as much of the requested amount as its own stock allows and
    passes the remainder to the next handler. Stock only changes when the
    whole chain manages to break the amount down exactly.
    """

    def __init__(self, note_value: int, note_count: int = 0):
        _validate_amount(note_value)
        _validate_amount(note_count)
        if note_value <= 0:
            raise ValueError("Note value must be positive")
        if note_count < 0:
            raise ValueError("Note count cannot be negative")

        self._note_value = note_value
        self._note_count = note_count
        self._next_handler: Optional['NoteHandler'] = None
        self._previous_handler: Optional['NoteHandler'] = None

    def get_note_value(self) -> int:
        return self._note_value

    def get_note_count(self) -> int:
        return self._note_count

    def get_next(self) -> Optional['NoteHandler']:
        return self._next_handler

    def get_previous(self) -> Optional['NoteHandler']:
        return self._previous_handler

    def get_total_value(self) -> int:
        return self._note_value * self._note_count

    def set_next(self, handler: 'NoteHandler') -> 'NoteHandler':
        """Link the next handler; returns it so links can be chained"""
        if self._next_handler is not None:
            raise ValueError(f"Handler for {self._note_value} is already linked")
        if handler._previous_handler is not None:
            raise ValueError(f"Handler for {handler._note_value} already has a predecessor")

        upstream = list(self._iter_upstream())
        downstream = list(iter_chain(handler))

        if any(node is other for node in downstream for other in upstream):
            raise ValueError("Linking would create a cycle in the chain")

        seen = set()
        for node in upstream + downstream:
            if node.get_note_value() in seen:
                raise ValueError(f"Duplicate denomination in chain: {node.get_note_value()}")
            seen.add(node.get_note_value())

        self._next_handler = handler
        handler._previous_handler = self
        return handler

    def _iter_upstream(self) -> Iterator['NoteHandler']:
        """Yield this handler and its predecessors back to the head"""
        handler = self
        while handler is not None:
            yield handler
            handler = handler._previous_handler

    def dispense(self, amount: int) -> DispenseResult:
        """
        Dispense amount starting at this handler.

        Returns a successful result with the notes per denomination, or a
        failed result with an empty mapping if the rest of the chain cannot
        make up the exact amount. Failed attempts leave stock untouched.
        """
        _validate_amount(amount)
        if amount < 0:
            raise ValueError("Amount cannot be negative")

        allocation = self._plan(amount)
        if allocation is None:
            return DispenseResult(success=False)

        self._commit(allocation)
        return DispenseResult(success=True, notes_dispensed=allocation)

    def can_dispense(self, amount: int) -> bool:
        """Dry run of dispense; never touches stock"""
        _validate_amount(amount)
        return amount >= 0 and self._plan(amount) is not None

    def _plan(self, amount: int) -> Optional[Dict[int, int]]:
        """
        Work out the allocation for amount without mutating any stock.
        Returns None if the chain cannot reach an exact zero remainder.
        """
        required_notes = amount // self._note_value

        if required_notes < self._note_count:
            notes = required_notes
        elif self._next_handler is not None:
            # Hand over the whole stock, successors cover the rest
            notes = self._note_count
        else:
            # Tail handler without spare notes takes nothing
            notes = 0
        remaining = amount - notes * self._note_value

        # Only denominations actually paid out appear in the mapping
        allocation: Dict[int, int] = {}
        if notes > 0:
            allocation[self._note_value] = notes

        if remaining == 0:
            return allocation

        if self._next_handler is None:
            return None

        rest = self._next_handler._plan(remaining)
        if rest is None:
            return None

        allocation.update(rest)
        return allocation

    def _commit(self, allocation: Dict[int, int]) -> None:
        """Apply a planned allocation to this handler and its successors"""
        handlers = list(iter_chain(self))

        # Check everything before touching any stock
        for handler in handlers:
            notes = allocation.get(handler._note_value, 0)
            if notes > handler._note_count:
                raise ValueError(
                    f"Allocation of {notes} x {handler._note_value} exceeds stock "
                    f"of {handler._note_count}"
                )

        for handler in handlers:
            handler._note_count -= allocation.get(handler._note_value, 0)

    def __repr__(self) -> str:
        return f"NoteHandler({self._note_value} x {self._note_count})"


# ==================== Chain Assembly ====================

def iter_chain(head: Optional[NoteHandler]) -> Iterator[NoteHandler]:
    """Yield handlers in chain order starting from head"""
    handler = head
    while handler is not None:
        yield handler
        handler = handler.get_next()


def link_handlers(handlers: List[NoteHandler]) -> NoteHandler:
    """Link handlers in the given order and return the head"""
    if not handlers:
        raise ValueError("Cannot build a chain without handlers")

    # Validate the whole list first so a bad entry leaves nothing half-linked
    values = [h.get_note_value() for h in handlers]
    if len(set(values)) != len(values):
        raise ValueError(f"Duplicate denomination in chain: {values}")

    for handler in handlers:
        if handler.get_next() is not None or handler.get_previous() is not None:
            raise ValueError(f"{handler} is already linked into a chain")

    for current, successor in zip(handlers, handlers[1:]):
        current.set_next(successor)

    return handlers[0]


class ChainBuilder:
    """Builds a descending denomination chain from (note_value, note_count) pairs"""

    @staticmethod
    def build(denominations: List[Tuple[int, int]]) -> NoteHandler:
        if not denominations:
            raise ValueError("At least one denomination is required")

        seen = set()
        handlers = []
        for note_value, note_count in denominations:
            if note_value in seen:
                raise ValueError(f"Duplicate denomination: {note_value}")
            seen.add(note_value)
            handlers.append(NoteHandler(note_value, note_count))

        # Greedy allocation depends on highest-first order
        handlers.sort(key=lambda h: h.get_note_value(), reverse=True)
        return link_handlers(handlers)


# ==================== Entry Point ====================

class CashDispenser:
    """
    Gatekeeper in front of the note handler chain.

    Rejects amounts below the minimum dispensable unit without touching the
    chain, otherwise delegates to the head handler. Every top-level call runs
    under a single lock so a failed attempt can never be observed half-way.
    """

    def __init__(self, head: NoteHandler, minimum_amount: Optional[int] = None):
        if head is None:
            raise ValueError("Dispenser requires a handler chain")

        self._head = head
        if minimum_amount is None:
            minimum_amount = min(h.get_note_value() for h in iter_chain(head))
        _validate_amount(minimum_amount)
        if minimum_amount <= 0:
            raise ValueError("Minimum amount must be positive")
        self._minimum_amount = minimum_amount

        self._history: List[DispenseRecord] = []
        self._record_counter = 0
        self._lock = Lock()

    @classmethod
    def from_config(cls, denominations: Optional[List[Tuple[int, int]]] = None,
                    minimum_amount: Optional[int] = None) -> 'CashDispenser':
        """Create a dispenser from (note_value, note_count) pairs"""
        if denominations is None:
            denominations = DEFAULT_DENOMINATIONS
        return cls(ChainBuilder.build(denominations), minimum_amount)

    def get_minimum_amount(self) -> int:
        return self._minimum_amount

    def dispense(self, amount: int) -> DispenseResult:
        """Dispense cash; failures come back as an unsuccessful result"""
        _validate_amount(amount)
        print(f"Disbursing {amount}")

        with self._lock:
            if amount <= 0 or amount < self._minimum_amount:
                print(f"Rejected: amount must be at least {self._minimum_amount}")
                self._record(amount, DispenseStatus.REJECTED, {})
                return DispenseResult(success=False)

            result = self._head.dispense(amount)

            if not result.success:
                print(f"Cannot dispense {amount} with available notes")
                self._record(amount, DispenseStatus.INSUFFICIENT_NOTES, {})
                return DispenseResult(success=False)

            self._record(amount, DispenseStatus.SUCCESS, result.notes_dispensed)
            return result

    def can_dispense(self, amount: int) -> bool:
        """Check whether amount could be dispensed right now"""
        _validate_amount(amount)
        with self._lock:
            if amount <= 0 or amount < self._minimum_amount:
                return False
            return self._head.can_dispense(amount)

    def get_stock(self) -> List[Tuple[int, int]]:
        """Snapshot of (note_value, note_count) in chain order"""
        with self._lock:
            return [(h.get_note_value(), h.get_note_count()) for h in iter_chain(self._head)]

    def get_total_cash(self) -> int:
        return sum(value * count for value, count in self.get_stock())

    def report_stock(self) -> None:
        """Print remaining notes for each denomination, highest first"""
        for value, count in self.get_stock():
            print(f"Remaining notes of {value}: {count}")

    def get_history(self) -> List[DispenseRecord]:
        with self._lock:
            return list(self._history)

    def _record(self, amount: int, status: DispenseStatus,
                notes_dispensed: Dict[int, int]) -> DispenseRecord:
        self._record_counter += 1
        record = DispenseRecord(
            record_id=f"DSP-{self._record_counter:06d}",
            amount=amount,
            status=status,
            notes_dispensed=dict(notes_dispensed),
            timestamp=datetime.now()
        )
        self._history.append(record)
        return record

    def display_status(self) -> None:
        """Display dispenser inventory"""
        print(f"\n{'='*60}")
        print("Cash Dispenser Status")
        print(f"{'='*60}")
        print(f"Total Cash: {self.get_total_cash()}")
        print(f"Minimum Amount: {self._minimum_amount}")
        print(f"\nCash Inventory:")

        for value, count in self.get_stock():
            print(f"  {value}: {count} notes ({value * count})")

        print(f"\nTotal Requests: {len(self.get_history())}")
        print(f"{'='*60}\n")

    def display_history(self, limit: int = 10) -> None:
        """Display recent dispense requests"""
        print(f"\n{'='*60}")
        print("Recent Dispense Requests")
        print(f"{'='*60}")

        recent = self.get_history()[-limit:]

        if not recent:
            print("No requests yet")
        else:
            for record in reversed(recent):
                timestamp = record.timestamp.strftime("%Y-%m-%d %H:%M:%S")
                print(f"\n[{timestamp}] {record.record_id}")
                print(f"  Amount: {record.amount}")
                print(f"  Status: {record.status.value}")
                for value, count in sorted(record.notes_dispensed.items(), reverse=True):
                    print(f"  {value} x {count}")

        print(f"{'='*60}\n")


# ==================== Demo Usage ====================

def main():
    """Demo the cash dispenser chain"""
    print("=== ATM Cash Dispenser Demo ===\n")

    dispenser = CashDispenser.from_config(DEFAULT_DENOMINATIONS)
    dispenser.display_status()

    for amount in [2700, 7000, 10000, 5000, 1000]:
        print(f"\n{'='*16} Dispensing {amount}: {'='*16}")
        result = dispenser.dispense(amount)
        print(f"Success: {result.success}")
        for value, count in sorted(result.notes_dispensed.items(), reverse=True):
            print(f"  {value} x {count}")

        print(f"\n{'='*16} remaining: {'='*16}")
        dispenser.report_stock()

    print(f"\n{'='*16} Rejected request: {'='*16}")
    dispenser.dispense(50)

    dispenser.display_history(limit=10)

    print("\n=== Demo Complete ===")


if __name__ == "__main__":
    main()


# ## Key Design Decisions

# ### **Design Patterns Used:**

# 1. **Chain of Responsibility** - note handlers:
#    - One generic `NoteHandler` per denomination
#    - Each covers what it can and forwards the remainder
#    - `CashDispenser` is the gatekeeper in front of the chain

# 2. **Builder** (`ChainBuilder`):
#    - Validates (note_value, note_count) pairs
#    - Orders handlers highest to lowest before linking

# ### **Dispensing Algorithm:**
# ```
# Amount: 2700
# Chain: 1000(10) -> 500(10) -> 100(10)
#
# - 1000 x 2 = 2000 (remaining: 700)
# - 500 x 1 = 500 (remaining: 200)
# - 100 x 2 = 200 (remaining: 0)
#
# Result: {1000: 2, 500: 1, 100: 2}
# ```

# **Cannot Dispense Scenarios**:
# - Below the smallest note (rejected before the chain)
# - Not a multiple of the smallest note
# - Not enough notes left further down the chain
# - Last handler would have to give up all of its notes (e.g. 16000 from
#   1000(10) -> 500(10) -> 100(10))

# ### **Rollback:**
# Allocation is planned across the whole chain first and committed only on
# success, so a failed request never changes stock.

# ### **Order Sensitivity:**
# ```
# Chain: 100(10) -> 500(10) -> 1000(10)
# Request 2700: 100 x 10, 500 x 3, remaining 200 -> 1000 cannot cover -> fail
# ```
