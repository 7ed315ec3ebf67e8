import sys
import logging
import argparse

from stash.save.manager import SaveManager
from stashcore.core.config import StoreConfig


class VerificationError(Exception):
    """A save file failed a check."""


def main(argv=None):
    parser = argparse.ArgumentParser(description="Check an inventory save file.")
    parser.add_argument("--save-path", default="saves")
    parser.add_argument("--save-name", default="inventory")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)
    logger = logging.getLogger("SaveVerification")

    config = StoreConfig(save_path=args.save_path, save_name=args.save_name)
    save_mgr = SaveManager.from_config(config)

    try:
        if not save_mgr.has_save:
            raise VerificationError(f"No save file at {save_mgr.file_path}")

        logger.info(f"Checking {save_mgr.file_path}...")
        errors = save_mgr.schema_errors()
        for message in errors:
            logger.error(f"Schema violation: {message}")
        if errors:
            raise VerificationError(f"{len(errors)} schema violation(s)")

        if not save_mgr.validate_save():
            raise VerificationError("Checksum mismatch")

        state = save_mgr.load_state()
        problems = state.check_invariants()
        if problems:
            raise VerificationError("; ".join(problems))

        logger.info(
            f"VERIFICATION SUCCESSFUL: {len(state.items)} items, "
            f"{len(state.storage_order)} stored, "
            f"{sum(1 for i in state.slots.values() if i)} equipped."
        )

    except Exception as e:
        logger.error(f"VERIFICATION FAILED: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
