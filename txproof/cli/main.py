"""
txproof CLI - build and verify Merkle commitments from the command line

Main entry point for all CLI commands. Inputs are JSON files produced by
whatever fetched the block data; output is JSON on stdout.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional

import click

from txproof.utils.logger import TxProofLogger, setup_logging, get_logger

logger = get_logger("cli")


def _read_json(path: str) -> Any:
    """Load a JSON document, '-' meaning stdin."""
    try:
        if path == "-":
            return json.load(sys.stdin)
        return json.loads(Path(path).read_text())
    except json.JSONDecodeError as e:
        raise click.ClickException(f"{path}: invalid JSON ({e})")


def _parse_hex(value: str, name: str, expected_bytes: Optional[int] = None) -> bytes:
    """Decode a hex option, raising a click error on bad input."""
    from txproof.crypto import hex_to_bytes
    from txproof.utils.validation import validate_hex_string

    valid, err = validate_hex_string(value, name, expected_bytes)
    if not valid:
        raise click.BadParameter(err, param_hint=name)
    return hex_to_bytes(value)


def _check_size(ctx, items: List[Any], name: str, min_length: int = 1):
    """Enforce the configured leaf limit on an input list."""
    from txproof.utils.validation import validate_array

    valid, err = validate_array(items, name, max_length=ctx.obj["config"].max_leaves, min_length=min_length)
    if not valid:
        raise click.ClickException(err)


def _emit(data: Any):
    click.echo(json.dumps(data, indent=2))


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--config", "config_path", default=None, type=click.Path(exists=True, dir_okay=False), help="JSON config file")
@click.option("--env-file", default=None, type=click.Path(exists=True, dir_okay=False), help=".env file to load")
@click.version_option(version="0.1.0")
@click.pass_context
def cli(ctx, debug, config_path, env_file):
    """Merkle commitments and inclusion proofs for transaction data"""
    from txproof.core.config import load_config

    try:
        config = load_config(config_path, env_file=env_file)
    except (ValueError, OSError) as e:
        raise click.ClickException(f"Invalid configuration: {e}")

    level = logging.DEBUG if debug else config.level
    TxProofLogger.reset()
    setup_logging(level=level, log_dir=str(config.log_dir), log_to_file=config.log_to_file)

    ctx.ensure_object(dict)
    ctx.obj["config"] = config


# =============================================================================
# Tree Commands
# =============================================================================


@cli.command("build")
@click.argument("leaves_file")
@click.pass_context
def build_cmd(ctx, leaves_file):
    """Build a tree from a JSON list of hex leaf blobs"""
    from txproof.core.merkle import MerkleTree
    from txproof.crypto import bytes_to_hex

    items = _read_json(leaves_file)
    _check_size(ctx, items, "leaves")
    leaves = [_parse_hex(item, f"leaves[{i}]") for i, item in enumerate(items)]

    tree = MerkleTree.build(leaves)
    logger.debug(f"Built tree over {len(leaves)} leaves (padded to {tree.padded_size})")

    _emit({
        "root": bytes_to_hex(tree.root),
        "leaf_count": tree.leaf_count,
        "depth": tree.depth,
        "proofs": [[bytes_to_hex(d) for d in proof] for proof in tree.proofs],
    })


@cli.command("verify")
@click.option("--leaf", required=True, help="Leaf blob as hex")
@click.option("--root", required=True, help="Expected root (32-byte hex)")
@click.option("--proof", "proof", multiple=True, help="Sibling digest (repeat, leaf-to-root order)")
@click.pass_context
def verify_cmd(ctx, leaf, root, proof):
    """Check a leaf against a root using its proof"""
    from txproof.core.merkle import MerkleTree

    leaf_bytes = _parse_hex(leaf, "leaf")
    root_bytes = _parse_hex(root, "root", 32)
    siblings = [_parse_hex(p, f"proof[{i}]", 32) for i, p in enumerate(proof)]

    if MerkleTree.verify(leaf_bytes, siblings, root_bytes):
        click.echo("valid")
    else:
        click.echo("invalid")
        ctx.exit(1)


# =============================================================================
# Block Commitment Commands
# =============================================================================


@cli.command("receipts")
@click.argument("receipts_file")
@click.option("--index", default=None, type=int, help="transactionIndex of the receipt to prove")
@click.pass_context
def receipts_cmd(ctx, receipts_file, index):
    """Commit to a JSON list of transaction receipts"""
    from txproof.core.commitment import receipt_commitment

    receipts = _read_json(receipts_file)
    _check_size(ctx, receipts, "receipts")

    try:
        commitment = receipt_commitment(receipts, index=index)
    except (ValueError, LookupError) as e:
        raise click.ClickException(str(e))

    _emit(commitment.to_dict())


@cli.command("hashes")
@click.argument("block_file")
@click.option("--tx-hash", default=None, help="Transaction hash to prove")
@click.pass_context
def hashes_cmd(ctx, block_file, tx_hash):
    """Commit to a block's transaction hashes"""
    from txproof.core.commitment import hash_commitment

    block = _read_json(block_file)
    if not isinstance(block, dict) or "transactions" not in block or "transactionsRoot" not in block:
        raise click.ClickException("Block file must have 'transactions' and 'transactionsRoot'")
    _check_size(ctx, block["transactions"], "transactions", min_length=0)

    try:
        commitment = hash_commitment(block["transactions"], block["transactionsRoot"], tx_hash=tx_hash)
    except (ValueError, LookupError) as e:
        raise click.ClickException(str(e))

    _emit(commitment.to_dict())


# =============================================================================
# Demo Command
# =============================================================================


@cli.command("demo")
@click.option("--leaves", "count", default=8, type=click.IntRange(1, 1024), help="Number of single-byte leaves")
def demo(count):
    """Walk through building and verifying a small tree"""
    from txproof.core.merkle import MerkleTree
    from txproof.crypto import bytes_to_hex

    click.echo("=" * 60)
    click.echo("  TXPROOF - MERKLE DEMO")
    click.echo("=" * 60)
    click.echo()

    leaves = [bytes([i % 256]) for i in range(count)]
    tree = MerkleTree.build(leaves)

    click.echo(f"Built tree over {count} leaves")
    click.echo(f"  Padded size: {tree.padded_size}")
    click.echo(f"  Proof length: {tree.depth}")
    click.echo(f"  Root: {bytes_to_hex(tree.root)}")
    click.echo()

    target = min(3, count - 1)
    ok = MerkleTree.verify(leaves[target], tree.proof(target), tree.root)
    click.echo(f"Verify leaf {target} with its own proof: {'valid' if ok else 'invalid'}")

    if count > 1:
        other = (target + 1) % count
        ok = MerkleTree.verify(leaves[target], tree.proof(other), tree.root)
        click.echo(f"Verify leaf {target} with proof {other}: {'valid' if ok else 'invalid'}")

    click.echo()
    click.echo("Done.")


if __name__ == "__main__":
    cli()
