"""Checkpointing of completed workflow steps."""
import json
from pathlib import Path
from typing import Optional, Dict, Any

from utils.logger import setup_logger
import config

logger = setup_logger(__name__)


class StepCheckpoint:
    """Persists the result of each finished step so a replayed job skips it."""

    def __init__(self, job_id: str, checkpoint_dir: Path = config.CHECKPOINT_DIR):
        """Initialize checkpoint manager.

        Args:
            job_id: Unique ID of the generation job
            checkpoint_dir: Directory to store checkpoints
        """
        self.job_id = job_id
        self.checkpoint_dir = Path(checkpoint_dir)
        self.checkpoint_dir.mkdir(parents=True, exist_ok=True)
        self.checkpoint_file = self.checkpoint_dir / f"{job_id}_steps.json"
        self._steps: Dict[str, Any] = self._read()

    def _read(self) -> Dict[str, Any]:
        if not self.checkpoint_file.exists():
            return {}

        try:
            with open(self.checkpoint_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
            steps = data.get('steps', {})
            logger.info(f"✓ Checkpoint loaded: {len(steps)} completed step(s) for job {self.job_id}")
            return steps
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to load checkpoint, starting fresh: {e}")
            return {}

    def _entry(self, step_name: str, fingerprint: Optional[str]) -> Optional[Dict[str, Any]]:
        entry = self._steps.get(step_name)
        if not isinstance(entry, dict) or 'result' not in entry:
            return None
        if fingerprint is not None and entry.get('fingerprint') != fingerprint:
            return None
        return entry

    def get(self, step_name: str, fingerprint: Optional[str] = None) -> Optional[Any]:
        entry = self._entry(step_name, fingerprint)
        return entry['result'] if entry is not None else None

    def has(self, step_name: str, fingerprint: Optional[str] = None) -> bool:
        """True when the step finished; with a fingerprint, only if its inputs match too."""
        return self._entry(step_name, fingerprint) is not None

    def save(self, step_name: str, result: Any, fingerprint: Optional[str] = None) -> None:
        """Record a finished step and write the checkpoint file.

        Args:
            step_name: Durable step name
            result: JSON-serialisable step result
            fingerprint: Hash of the step inputs the result was produced from
        """
        self._steps[step_name] = {'result': result, 'fingerprint': fingerprint}
        try:
            with open(self.checkpoint_file, 'w', encoding='utf-8') as f:
                json.dump({'job_id': self.job_id, 'steps': self._steps}, f, indent=2, ensure_ascii=False)
            logger.info(f"✓ Checkpoint saved: {step_name}")
        except (OSError, TypeError) as e:
            logger.warning(f"Failed to save checkpoint: {e}")

    def clear(self) -> None:
        """Delete checkpoint file."""
        self._steps = {}
        if self.checkpoint_file.exists():
            self.checkpoint_file.unlink()
            logger.info("Checkpoint cleared")

