"""
SplitSave RWF - Data Schema Module.

This module defines the fee schedule and the core data models for the
SplitSave system. Amounts and fees are plain integers expressed in the
smallest currency unit (RWF has no minor unit in practice).

Rwanda Mobile Money Context:
    - Fees are flat per bracket, not a percentage of the amount
    - A single transfer is limited to RWF 10,000,000
    - Tariff: https://www.mtn.co.rw/momo-tarrif/

Classes:
    FeeBracket: A closed amount range charged one flat fee.
    SavingsResult: Fee comparison between one transfer and a split plan.
    TransferRequest: A single transfer to be optimised.
    TransferAnalysis: Optimisation result for one transfer.
    OptimisationSnapshot: Complete batch run with metadata for audit purposes.
    BenchmarkResult: Timing and fee outcome of one optimisation run.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Tuple


# Supported transfer domain (inclusive)
MIN_AMOUNT = 1
MAX_AMOUNT = 10_000_000


@dataclass(frozen=True)
class FeeBracket:
    """
    A closed amount range charged one flat fee.

    Attributes:
        low: Smallest amount in the bracket (inclusive).
        high: Largest amount in the bracket (inclusive).
        fee: Flat fee charged for any amount in the bracket.
    """

    low: int
    high: int
    fee: int

    def contains(self, amount: int) -> bool:
        """Returns True if the amount falls inside this bracket."""
        return self.low <= amount <= self.high


FEE_BRACKETS: Tuple[FeeBracket, ...] = (
    FeeBracket(1, 1_000, 20),
    FeeBracket(1_001, 10_000, 100),
    FeeBracket(10_001, 150_000, 250),
    FeeBracket(150_001, 2_000_000, 1_500),
    FeeBracket(2_000_001, 5_000_000, 3_000),
    FeeBracket(5_000_001, 10_000_000, 5_000),
)

# Candidate chunk sizes for splitting, ascending
SPLIT_BOUNDS: Tuple[int, ...] = tuple(bracket.high for bracket in FEE_BRACKETS)


@dataclass(frozen=True)
class SavingsResult:
    """
    Fee comparison between sending one transfer and sending a split plan.

    Attributes:
        savings: original_fee - optimized_fee. Zero when splitting does
            not help.
        original_fee: Fee for sending the full amount at once.
        optimized_fee: Total fee for the split plan.
    """

    savings: int
    original_fee: int
    optimized_fee: int


@dataclass
class TransferRequest:
    """
    A single transfer to be optimised.

    Attributes:
        reference: Client reference or recipient label.
        amount: Transfer amount in RWF.
    """

    reference: str
    amount: int


@dataclass
class TransferAnalysis:
    """
    Optimisation result for one transfer.

    Attributes:
        transfer: Source transfer request.
        plan: Ordered chunk amounts summing to the transfer amount.
        savings: Fee comparison for the plan.
    """

    transfer: TransferRequest
    plan: List[int]
    savings: SavingsResult

    @property
    def chunk_count(self) -> int:
        """Returns the number of transfers in the plan."""
        return len(self.plan)

    @property
    def is_split(self) -> bool:
        """Returns True if the plan sends more than one transfer."""
        return len(self.plan) > 1


@dataclass
class OptimisationSnapshot:
    """
    Complete batch run with metadata for audit purposes.

    Attributes:
        timestamp: When the optimisation was performed.
        version: SplitSave version identifier.
        transfers: Analysed transfers with their plans.
        total_amount: Sum of all transfer amounts.
        total_original_fee: Sum of single-transfer fees.
        total_optimized_fee: Sum of split-plan fees.
        total_savings: total_original_fee - total_optimized_fee.
        split_count: Number of transfers whose plan has more than one chunk.
    """

    timestamp: datetime
    version: str
    transfers: List[TransferAnalysis]
    total_amount: int
    total_original_fee: int
    total_optimized_fee: int
    total_savings: int
    split_count: int


@dataclass
class BenchmarkResult:
    """
    Timing and fee outcome of one optimisation run.

    Attributes:
        amount: Total amount that was optimised.
        plan: Resulting chunk amounts.
        default_fee: Fee for sending the amount at once.
        total_fee: Total fee for the plan.
        execution_time_ms: Wall time spent building the plan.
    """

    amount: int
    plan: List[int]
    default_fee: int
    total_fee: int
    execution_time_ms: float
