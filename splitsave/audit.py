"""
SplitSave RWF - Audit and Serialisation Module.

This module provides JSON serialisation for optimisation audit trails.
Every snapshot records its timestamp and version so a saved plan can be
traced back to the fee schedule that produced it.

Classes:
    SnapshotEncoder: JSON encoder for datetime and dataclass values.
    AuditLogger: Manages JSON serialisation for audit and persistence.
"""

import json
from dataclasses import asdict, is_dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Union

from splitsave import __version__
from splitsave.schema import (
    OptimisationSnapshot,
    SavingsResult,
    TransferAnalysis,
    TransferRequest,
)


class SnapshotEncoder(json.JSONEncoder):
    """
    JSON encoder that handles datetime and dataclass values.
    """

    def default(self, obj: Any) -> Any:
        if isinstance(obj, datetime):
            return obj.isoformat()
        if is_dataclass(obj) and not isinstance(obj, type):
            return asdict(obj)
        return super().default(obj)


class AuditLogger:
    """
    Manages JSON serialisation for audit and persistence.

    Example:
        >>> logger = AuditLogger()
        >>> json_str = logger.serialise_snapshot(snapshot)
        >>> restored = logger.deserialise_snapshot(json_str)
        >>> assert snapshot.total_savings == restored.total_savings
    """

    def __init__(self, version: Optional[str] = None):
        """
        Initialises the AuditLogger.

        Args:
            version: Version recorded as the generator of audit files.
                     Defaults to package version.
        """
        self._version = version or __version__

    def serialise_snapshot(self, snapshot: OptimisationSnapshot) -> str:
        """
        Serialises an OptimisationSnapshot to JSON string.

        Args:
            snapshot: Optimisation snapshot to serialise.

        Returns:
            JSON string representation.
        """
        data = self._snapshot_to_dict(snapshot)
        return json.dumps(data, cls=SnapshotEncoder, indent=2)

    def deserialise_snapshot(self, json_str: str) -> OptimisationSnapshot:
        """
        Deserialises a JSON string to OptimisationSnapshot.

        Args:
            json_str: JSON string to deserialise.

        Returns:
            Reconstructed OptimisationSnapshot.

        Raises:
            json.JSONDecodeError: If JSON is malformed.
            KeyError: If required fields are missing.
        """
        data = json.loads(json_str)
        return self._dict_to_snapshot(data)

    def save_to_file(
        self,
        snapshot: OptimisationSnapshot,
        file_path: Union[str, Path]
    ) -> None:
        """
        Saves an OptimisationSnapshot to a JSON file.

        Args:
            snapshot: Optimisation snapshot to save.
            file_path: Output file path.
        """
        file_path = Path(file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        json_str = self.serialise_snapshot(snapshot)
        file_path.write_text(json_str, encoding="utf-8")

    def load_from_file(self, file_path: Union[str, Path]) -> OptimisationSnapshot:
        """
        Loads an OptimisationSnapshot from a JSON file.

        Args:
            file_path: Path to JSON file.

        Returns:
            Loaded OptimisationSnapshot.

        Raises:
            FileNotFoundError: If file does not exist.
            json.JSONDecodeError: If JSON is malformed.
        """
        file_path = Path(file_path)

        if not file_path.exists():
            raise FileNotFoundError(f"Audit file not found: {file_path}")

        json_str = file_path.read_text(encoding="utf-8")
        return self.deserialise_snapshot(json_str)

    def _snapshot_to_dict(self, snapshot: OptimisationSnapshot) -> Dict[str, Any]:
        """Converts OptimisationSnapshot to dictionary for JSON serialisation."""
        return {
            "metadata": {
                "timestamp": snapshot.timestamp,
                "version": snapshot.version,
                "generated_by": f"SplitSave RWF {self._version}",
            },
            "summary": {
                "total_amount": snapshot.total_amount,
                "total_original_fee": snapshot.total_original_fee,
                "total_optimized_fee": snapshot.total_optimized_fee,
                "total_savings": snapshot.total_savings,
                "split_count": snapshot.split_count,
                "transfer_count": len(snapshot.transfers),
            },
            "transfers": [
                self._transfer_analysis_to_dict(analysis)
                for analysis in snapshot.transfers
            ],
        }

    def _transfer_analysis_to_dict(
        self,
        analysis: TransferAnalysis
    ) -> Dict[str, Any]:
        """Converts TransferAnalysis to dictionary."""
        return {
            "transfer": analysis.transfer,
            "plan": list(analysis.plan),
            "fees": analysis.savings,
        }

    def _dict_to_snapshot(self, data: Dict[str, Any]) -> OptimisationSnapshot:
        """Converts dictionary to OptimisationSnapshot."""
        metadata = data["metadata"]
        summary = data["summary"]

        transfers = [
            self._dict_to_transfer_analysis(item)
            for item in data["transfers"]
        ]

        return OptimisationSnapshot(
            timestamp=datetime.fromisoformat(metadata["timestamp"]),
            version=metadata["version"],
            transfers=transfers,
            total_amount=summary["total_amount"],
            total_original_fee=summary["total_original_fee"],
            total_optimized_fee=summary["total_optimized_fee"],
            total_savings=summary["total_savings"],
            split_count=summary["split_count"],
        )

    def _dict_to_transfer_analysis(
        self,
        data: Dict[str, Any]
    ) -> TransferAnalysis:
        """Converts dictionary to TransferAnalysis."""
        transfer_data = data["transfer"]
        fee_data = data["fees"]

        return TransferAnalysis(
            transfer=TransferRequest(
                reference=transfer_data["reference"],
                amount=transfer_data["amount"],
            ),
            plan=list(data["plan"]),
            savings=SavingsResult(
                savings=fee_data["savings"],
                original_fee=fee_data["original_fee"],
                optimized_fee=fee_data["optimized_fee"],
            ),
        )

    def generate_filename(self, prefix: str = "audit") -> str:
        """
        Generates a timestamped filename for audit files.

        Args:
            prefix: Filename prefix. Defaults to "audit".

        Returns:
            Filename like "audit_2025-04-06_143052.json".
        """
        timestamp = datetime.now().strftime("%Y-%m-%d_%H%M%S")
        return f"{prefix}_{timestamp}.json"
