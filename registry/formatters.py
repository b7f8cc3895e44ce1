"""Display strings built from chain-registry JSON files"""

import json
import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

MAX_ENDPOINTS_PER_SERVICE = 5

# chain.json may be malformed or missing any of the fields we read
DATA_ERRORS = (OSError, ValueError, KeyError, TypeError, AttributeError, IndexError)

_URL_PREFIX = re.compile(r"^(https?://)?(www\.)?")
_PROVIDER_JUNK = re.compile(r"[^\w\s.-]")


def load_json(path: Path) -> Dict[str, Any]:
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def load_chain(root: Path, chain: str) -> Dict[str, Any]:
    """Parsed chain.json of a chain"""
    return load_json(Path(root) / chain / "chain.json")


def _first_address(services: Optional[List[Dict[str, Any]]]) -> Optional[str]:
    for service in services or []:
        if service.get("address"):
            return service["address"]
    return None


def _sanitize_provider(provider: Optional[str]) -> str:
    if not provider:
        return "unnamed"
    return _PROVIDER_JUNK.sub("", provider).replace(".", "_")


def _escape_markdown(text: str) -> str:
    return text.replace("_", "\\_").replace("*", "\\*")


def preferred_explorer(explorers: Optional[List[Dict[str, Any]]]) -> Optional[str]:
    """
    Pick the explorer to show in the chain summary

    URLs are compared without scheme and 'www.'; ones starting with 'c' win,
    then 'm', then alphabetical order.
    """
    candidates = [e for e in explorers or [] if e.get("url")]
    if not candidates:
        return None

    def rank(explorer: Dict[str, Any]):
        bare = _URL_PREFIX.sub("", explorer["url"])
        if bare.startswith("c"):
            group = 0
        elif bare.startswith("m"):
            group = 1
        else:
            group = 2
        return group, bare.casefold()

    return min(candidates, key=rank)["url"]


def rest_address(root: Path, chain: str) -> Optional[str]:
    """First REST address of the chain, None when unknown or unreadable"""
    try:
        chain_data = load_chain(root, chain)
        return _first_address(chain_data.get("apis", {}).get("rest"))
    except DATA_ERRORS as e:
        logger.error(f"Error reading REST address for {chain}: {e}")
        return None


def chain_info(root: Path, chain: str) -> str:
    """Markdown summary of chain identity"""
    try:
        chain_data = load_chain(root, chain)
        asset_data = load_json(Path(root) / chain / "assetlist.json")

        staking_tokens = chain_data.get("staking", {}).get("staking_tokens") or [{}]
        base_denom = staking_tokens[0].get("denom") or "Unknown"

        assets = asset_data.get("assets") or [{}]
        denom_units = assets[0].get("denom_units") or []
        decimals = denom_units[-1].get("exponent", "Unknown") if denom_units else "Unknown"

        apis = chain_data.get("apis", {})
        rpc = _first_address(apis.get("rpc")) or "Unknown"
        rest = _first_address(apis.get("rest")) or "Unknown"
        explorer = preferred_explorer(chain_data.get("explorers")) or "Unknown"

        return (
            f"Chain ID: `{chain_data.get('chain_id')}`\n"
            f"Chain Name: `{chain_data.get('chain_name')}`\n"
            f"RPC: `{rpc}`\n"
            f"REST: `{rest}`\n"
            f"Address Prefix: `{chain_data.get('bech32_prefix')}`\n"
            f"Base Denom: `{base_denom}`\n"
            f"Cointype: `{chain_data.get('slip44')}`\n"
            f"Decimals: `{decimals}`\n"
            f"Block Explorer: `{explorer}`"
        )
    except DATA_ERRORS as e:
        logger.error(f"Error fetching data for {chain}: {e}")
        return (
            f"Error fetching data for {_escape_markdown(chain)}. "
            "Please contact developer or open an issue on Github."
        )


def _format_endpoints(services: Optional[List[Dict[str, Any]]], title: str) -> str:
    if not services:
        return ""
    lines = [
        f"  {_escape_markdown(_sanitize_provider(service.get('provider')))}: `{service.get('address')}`"
        for service in services[:MAX_ENDPOINTS_PER_SERVICE]
    ]
    return f"{_escape_markdown(title)}\n-----------\n" + "\n".join(lines) + "\n\n"


def chain_endpoints(root: Path, chain: str) -> str:
    """Markdown list of RPC, REST, gRPC and EVM JSON-RPC endpoints"""
    try:
        apis = load_chain(root, chain)["apis"]
        text = (
            _format_endpoints(apis.get("rpc"), "RPC")
            + _format_endpoints(apis.get("rest"), "API")
            + _format_endpoints(apis.get("grpc"), "GRPC")
            + _format_endpoints(apis.get("evm-http-jsonrpc"), "EVM-HTTP-JSONRPC")
        )
        return text or "No endpoints listed for this chain."
    except DATA_ERRORS as e:
        logger.error(f"Error fetching endpoints for {chain}: {e}")
        return f"Error fetching endpoints for {_escape_markdown(chain)}. Please contact developer or open an issue on Github."


def _format_peers(peers: Optional[List[Dict[str, Any]]], title: str) -> str:
    header = f"*{title}*\n---------------------\n"
    if not peers:
        return header + "No data available\n\n"
    blocks = []
    for peer in peers:
        peer_id = f"id: `{peer['id']}`" if peer.get("id") else "id: unavailable"
        address = f"URL: `{peer['address']}`" if peer.get("address") else "URL: unavailable"
        provider = _escape_markdown(_sanitize_provider(peer.get("provider")))
        blocks.append(f"\n*{provider}*:\n---------------------\n {peer_id}\n {address}")
    return header + "\n".join(blocks) + "\n\n"


def chain_peer_nodes(root: Path, chain: str) -> str:
    """Markdown list of seed and persistent peers"""
    try:
        peers = load_chain(root, chain).get("peers", {})
        return (
            _format_peers(peers.get("seeds"), "Seed Nodes")
            + _format_peers(peers.get("persistent_peers"), "Peer Nodes")
        )
    except DATA_ERRORS as e:
        logger.error(f"Error fetching peer nodes for {chain}: {e}")
        return f"Error fetching peer nodes for {_escape_markdown(chain)}. Please contact developer or open an issue on Github."


def chain_block_explorers(root: Path, chain: str) -> str:
    """Plain-text list of block explorers"""
    try:
        explorers = load_chain(root, chain)["explorers"]
        if not explorers:
            return "No block explorers listed for this chain."
        return "\n".join(
            f"{explorer.get('kind') or 'explorer'}\n____________________\n{explorer['url']}\n"
            for explorer in explorers
        )
    except DATA_ERRORS as e:
        logger.error(f"Error fetching block explorers for {chain}: {e}")
        return f"Error fetching block explorers for {chain}. Please contact developer or open an issue on Github."


def _format_start_time(value: str) -> str:
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).strftime("%Y-%m-%d")
    except (AttributeError, ValueError):
        return str(value)


def format_pool_incentives(data: Dict[str, Any]) -> str:
    """
    Plain-text summary of pool incentives

    Args:
        data: Incentive service document, {"data": [{start_time, num_epochs_paid_over, filled_epochs, coins}]}

    Returns:
        One block per incentive
    """
    incentives = data["data"]
    if not incentives:
        return "No incentives found for this pool."

    blocks = []
    for incentive in incentives:
        lines = [
            f"Start Time: {_format_start_time(incentive['start_time'])}",
            f"Duration: {int(incentive['num_epochs_paid_over'])} days",
            f"Elapsed: {int(incentive['filled_epochs'])} days",
        ]
        lines.extend(
            f"Coin: {coin['denom']}, Amount: {coin['amount']}"
            for coin in incentive.get("coins", [])
        )
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


def format_denom_trace(denom_trace: Dict[str, Any]) -> str:
    return f"IBC Denom Trace: \n{json.dumps(denom_trace, indent=2)}"
