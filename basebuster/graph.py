"""Token graph of pools and the search for arbitrage cycles through it."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from basebuster.pools import Pool, PoolType, SwapPath, SwapStep

__all__ = ["ArbGraph", "generate_cycles", "DEFAULT_MAX_HOPS"]

DEFAULT_MAX_HOPS = 2


@dataclass(frozen=True)
class _Edge:
    source: str
    target: str
    pool: Pool


class ArbGraph:
    """Undirected multigraph: tokens are nodes, pools are edges."""

    def __init__(self, pools: Iterable[Pool]) -> None:
        self._nodes: dict[str, None] = {}
        self._edges: list[_Edge] = []
        for pool in pools:
            if pool.pool_type is PoolType.BALANCER_V2:
                self._add_balancer_pool(pool)
            elif pool.pool_type is PoolType.CURVE_TRI_CRYPTO:
                self._add_multi_token_pool(pool)
            else:
                self._add_edge(pool.token0, pool.token1, pool)

    def _add_edge(self, token_a: str, token_b: str, pool: Pool) -> None:
        self._nodes.setdefault(token_a)
        self._nodes.setdefault(token_b)
        self._edges.append(_Edge(token_a, token_b, pool))

    def _add_multi_token_pool(self, pool: Pool) -> None:
        tokens = pool.tokens()
        for token in tokens:
            self._nodes.setdefault(token)
        for i, token_in in enumerate(tokens):
            for token_out in tokens[i + 1 :]:
                self._add_edge(token_in, token_out, pool)

    def _add_balancer_pool(self, pool: Pool) -> None:
        tokens = pool.tokens()
        balances = dict(zip(tokens, pool.balances))
        for token in tokens:
            self._nodes.setdefault(token)
        for i, token_in in enumerate(tokens):
            for token_out in tokens[i + 1 :]:
                if balances.get(token_in, 0) and balances.get(token_out, 0):
                    self._add_edge(token_in, token_out, pool)

    def _neighbours(self, token: str) -> list[tuple[str, Pool]]:
        # Edges leaving the node first, then edges arriving, newest first.
        outgoing = [(e.target, e.pool) for e in reversed(self._edges) if e.source == token]
        incoming = [
            (e.source, e.pool)
            for e in reversed(self._edges)
            if e.target == token and e.source != token
        ]
        return outgoing + incoming

    def find_cycles(self, start_token: str, max_hops: int) -> list[list[SwapStep]]:
        """Every cycle from *start_token* back to itself within *max_hops* swaps.

        Two-hop cycles are kept only when the two pools are of different types.
        """
        if start_token not in self._nodes:
            raise ValueError(f"token {start_token} is not in the graph")

        cycles: list[list[SwapStep]] = []
        path: list[tuple[str, Pool, str]] = []
        visited: set[str] = set()

        def walk(current: str) -> None:
            if len(path) >= max_hops:
                return
            for nxt, pool in self._neighbours(current):
                if nxt == start_token:
                    if len(path) >= 2 or (
                        len(path) == 1 and path[0][1].pool_type != pool.pool_type
                    ):
                        cycles.append(
                            [
                                SwapStep(p.address, base, quote, p.pool_type, p.fee)
                                for base, p, quote in (*path, (current, pool, nxt))
                            ]
                        )
                elif nxt not in visited:
                    path.append((current, pool, nxt))
                    visited.add(nxt)
                    walk(nxt)
                    path.pop()
                    visited.discard(nxt)

        walk(start_token)
        return cycles


def generate_cycles(pools: Iterable[Pool], start_token: str) -> list[SwapPath]:
    """Swap paths for every arbitrage cycle through *start_token*."""
    graph = ArbGraph(pools)
    return [
        SwapPath.from_steps(cycle)
        for cycle in graph.find_cycles(start_token, DEFAULT_MAX_HOPS)
    ]