"""
SplitSave RWF - Fee Optimisation Engine Module.

This module provides the fee lookup and the transfer splitting algorithm.
All functions are pure: they read only the immutable fee schedule in
splitsave.schema and hold no state between calls.

Amounts outside the supported range are reported as results rather than
exceptions: fee functions return None, while optimize_transactions returns
an empty plan.

Functions:
    calculate_fee: Flat fee for a single transfer.
    optimize_transactions: Split a total into a cheaper transfer plan.
    calculate_total_fee: Summed fee for a transfer plan.
    calculate_fees_savings: Fee comparison between one transfer and the plan.
    benchmark_optimisation: Time a single optimisation run.

Classes:
    TransferOptimiser: Batch engine producing analyses and snapshots.
"""

import time
from datetime import datetime
from typing import Iterable, List, Optional, Sequence

from splitsave import __version__
from splitsave.schema import (
    FEE_BRACKETS,
    MAX_AMOUNT,
    MIN_AMOUNT,
    SPLIT_BOUNDS,
    BenchmarkResult,
    OptimisationSnapshot,
    SavingsResult,
    TransferAnalysis,
    TransferRequest,
)


def calculate_fee(amount: int) -> Optional[int]:
    """
    Calculates the transfer fee for a single amount.

    Brackets are checked from the highest lower bound down, so the first
    match is the only match.

    Args:
        amount: Transfer amount in RWF.

    Returns:
        The flat fee for the amount's bracket, or None if the amount is
        outside 1 - 10,000,000.

    Example:
        >>> calculate_fee(5_000)
        100
        >>> calculate_fee(10_000_001) is None
        True
    """
    if amount < MIN_AMOUNT or amount > MAX_AMOUNT:
        return None

    for bracket in reversed(FEE_BRACKETS):
        if bracket.contains(amount):
            return bracket.fee

    return None


def optimize_transactions(total_amount: int) -> List[int]:
    """
    Splits a total into an ordered plan of smaller transfers.

    Each chunk is the largest bracket upper bound not exceeding what is
    left, or the whole remainder once it drops below the smallest bound.
    The greedy plan is then reconciled so it never costs more than
    sending the total at once.

    Args:
        total_amount: The total amount to be transferred.

    Returns:
        Chunk amounts summing to total_amount, or an empty list if the
        total is outside 1 - 10,000,000.
    """
    if total_amount < MIN_AMOUNT or total_amount > MAX_AMOUNT:
        return []

    chunks = _greedy_split(total_amount)
    return _collapse_costly_tail(chunks)


def calculate_total_fee(transactions: Iterable[int]) -> Optional[int]:
    """
    Calculates the summed fee for a sequence of transfers.

    Args:
        transactions: Transfer amounts.

    Returns:
        Sum of per-transfer fees, 0 for an empty sequence, or None as
        soon as any amount is invalid.
    """
    total_fee = 0
    for amount in transactions:
        fee = calculate_fee(amount)
        if fee is None:
            return None
        total_fee += fee
    return total_fee


def calculate_fees_savings(total_amount: int) -> Optional[SavingsResult]:
    """
    Calculates how much is saved by splitting a transfer.

    Args:
        total_amount: The total amount to be transferred.

    Returns:
        SavingsResult with savings, original fee and optimised fee, or
        None if the total is invalid.

    Example:
        >>> calculate_fees_savings(500)
        SavingsResult(savings=0, original_fee=20, optimized_fee=20)
    """
    original_fee = calculate_fee(total_amount)
    if original_fee is None:
        return None

    plan = optimize_transactions(total_amount)

    optimized_fee = calculate_total_fee(plan)
    if optimized_fee is None:
        return None

    return SavingsResult(
        savings=original_fee - optimized_fee,
        original_fee=original_fee,
        optimized_fee=optimized_fee
    )


def benchmark_optimisation(amount: int) -> Optional[BenchmarkResult]:
    """
    Times a single call to optimize_transactions.

    Args:
        amount: Total amount to optimise.

    Returns:
        BenchmarkResult with the plan, fees and execution time in
        milliseconds, or None if the amount is invalid.
    """
    start = time.perf_counter()
    plan = optimize_transactions(amount)
    elapsed_ms = (time.perf_counter() - start) * 1000

    default_fee = calculate_fee(amount)
    total_fee = calculate_total_fee(plan)
    if default_fee is None or total_fee is None:
        return None

    return BenchmarkResult(
        amount=amount,
        plan=plan,
        default_fee=default_fee,
        total_fee=total_fee,
        execution_time_ms=elapsed_ms
    )


def _greedy_split(total_amount: int) -> List[int]:
    """
    Builds the raw greedy plan over SPLIT_BOUNDS.

    Args:
        total_amount: Valid total amount.

    Returns:
        Chunk amounts summing to total_amount.
    """
    chunks: List[int] = []
    remaining = total_amount

    while remaining > 0:
        candidate = remaining
        for bound in reversed(SPLIT_BOUNDS):
            if bound <= remaining:
                candidate = bound
                break

        chunk = min(candidate, remaining)
        chunks.append(chunk)
        remaining -= chunk

    return chunks


def _collapse_costly_tail(chunks: Sequence[int]) -> List[int]:
    """
    Merges the tail of a greedy plan into one transfer where that is cheaper.

    Tries every split point i, keeping chunks[:i] and sending the rest as a
    single transfer. i == len(chunks) is the untouched plan and i == 0 is
    the unsplit total, so the result never costs more than either. Ties
    keep the longer greedy prefix.

    Args:
        chunks: Greedy plan for a valid total.

    Returns:
        The cheapest reconciled plan.
    """
    # suffix_sums[i] == sum(chunks[i:])
    suffix_sums = [0] * (len(chunks) + 1)
    for i in range(len(chunks) - 1, -1, -1):
        suffix_sums[i] = suffix_sums[i + 1] + chunks[i]

    prefix_fees = [0] * (len(chunks) + 1)
    for i, chunk in enumerate(chunks):
        prefix_fees[i + 1] = prefix_fees[i] + calculate_fee(chunk)

    best_index = len(chunks)
    best_fee = prefix_fees[best_index]

    for i in range(len(chunks) - 1, -1, -1):
        candidate_fee = prefix_fees[i] + calculate_fee(suffix_sums[i])
        if candidate_fee < best_fee:
            best_index = i
            best_fee = candidate_fee

    if best_index == len(chunks):
        return list(chunks)
    return list(chunks[:best_index]) + [suffix_sums[best_index]]


class TransferOptimiser:
    """
    Batch engine that optimises transfers and builds audit snapshots.

    Wraps the pure fee functions so a list of transfer requests can be
    analysed in one pass.

    Example:
        >>> optimiser = TransferOptimiser()
        >>> analysis = optimiser.analyse_transfer(
        ...     TransferRequest("Rent", 11_000)
        ... )
        >>> analysis.plan
        [10000, 1000]
    """

    def __init__(self, version: Optional[str] = None):
        """
        Initialises the TransferOptimiser.

        Args:
            version: Version identifier for snapshots.
                     Defaults to package version.
        """
        self._version = version or __version__

    def analyse_transfer(
        self,
        transfer: TransferRequest
    ) -> Optional[TransferAnalysis]:
        """
        Builds the split plan and fee comparison for one transfer.

        Args:
            transfer: Transfer to analyse.

        Returns:
            TransferAnalysis, or None if the amount is invalid.
        """
        original_fee = calculate_fee(transfer.amount)
        if original_fee is None:
            return None

        plan = optimize_transactions(transfer.amount)
        optimized_fee = calculate_total_fee(plan)
        if optimized_fee is None:
            return None

        return TransferAnalysis(
            transfer=transfer,
            plan=plan,
            savings=SavingsResult(
                savings=original_fee - optimized_fee,
                original_fee=original_fee,
                optimized_fee=optimized_fee
            )
        )

    def analyse_batch(
        self,
        transfers: Iterable[TransferRequest],
        timestamp: Optional[datetime] = None
    ) -> OptimisationSnapshot:
        """
        Analyses every transfer and aggregates the results.

        Transfers with invalid amounts are left out of the snapshot.

        Args:
            transfers: Transfers to analyse.
            timestamp: Snapshot time. Defaults to now.

        Returns:
            OptimisationSnapshot with per-transfer analyses and totals.
        """
        analyses: List[TransferAnalysis] = []
        for transfer in transfers:
            analysis = self.analyse_transfer(transfer)
            if analysis is not None:
                analyses.append(analysis)

        total_original_fee = sum(a.savings.original_fee for a in analyses)
        total_optimized_fee = sum(a.savings.optimized_fee for a in analyses)

        return OptimisationSnapshot(
            timestamp=timestamp or datetime.now(),
            version=self._version,
            transfers=analyses,
            total_amount=sum(a.transfer.amount for a in analyses),
            total_original_fee=total_original_fee,
            total_optimized_fee=total_optimized_fee,
            total_savings=total_original_fee - total_optimized_fee,
            split_count=sum(1 for a in analyses if a.is_split)
        )
