from __future__ import annotations

import os
from typing import Dict, Optional, Sequence, Tuple

import pandas as pd

from .config import DEFAULT_FREQUENCY_HZ
from .folded import Frame
from .samples import cycles_to_nanoseconds

COLUMNS = ["symbol", "self_cycles", "total_cycles", "percent", "cum_percent",
           "self_ns", "total_ns"]


def accumulate(frames: Sequence[Frame]) -> Tuple[Dict[str, int], Dict[str, int], int]:
    """
    Returns (self_cycles, total_cycles, total)
    """
    self_cycles: Dict[str, int] = {}
    total_cycles: Dict[str, int] = {}
    total = 0

    for frame in frames:
        total += frame.cycles

        leaf = frame.stack[0].display_name
        self_cycles[leaf] = self_cycles.get(leaf, 0) + frame.cycles

        # a recursive symbol is only counted once per sample
        for name in {symbol.display_name for symbol in frame.stack}:
            total_cycles[name] = total_cycles.get(name, 0) + frame.cycles

    return self_cycles, total_cycles, total


def flat_profile(
    frames: Sequence[Frame],
    frequency_hz: int = DEFAULT_FREQUENCY_HZ,
) -> Tuple[pd.DataFrame, Dict[str, int]]:
    self_cycles, total_cycles, total = accumulate(frames)
    if total <= 0:
        raise ValueError("no samples")

    df = pd.DataFrame(
        [(sym, total_cycles.get(sym, 0), self_cycles.get(sym, 0))
         for sym in total_cycles],
        columns=["symbol", "total_cycles", "self_cycles"],
    )
    # sort by self desc, then name asc
    df = df.sort_values(by=["self_cycles", "symbol"], ascending=[False, True],
                        ignore_index=True)
    df["percent"] = df["self_cycles"] / total * 100.0
    df["cum_percent"] = df["percent"].cumsum()
    df["self_ns"] = [cycles_to_nanoseconds(int(c), frequency_hz) for c in df["self_cycles"]]
    df["total_ns"] = [cycles_to_nanoseconds(int(c), frequency_hz) for c in df["total_cycles"]]
    meta = {
        "total_cycles": total,
        "total_ns": cycles_to_nanoseconds(total, frequency_hz),
    }
    return df[COLUMNS], meta


def filter_rows(df: pd.DataFrame, *, top: Optional[int] = None,
                thr_percent: Optional[float] = None) -> pd.DataFrame:
    out = df
    if thr_percent is not None:
        out = out[out["percent"] >= thr_percent]
    if top is not None:
        out = out.head(max(0, int(top)))
    return out


def _unit_scale_ns(x: float) -> Tuple[float, str]:
    """
    Pick a readable unit for a duration in nanoseconds.
    Returns (divisor, unit).
    """
    if x < 1e3:
        return 1.0, "ns"
    if x < 1e6:
        return 1e3, "us"
    if x < 1e9:
        return 1e6, "ms"
    return 1e9, "s"


def print_flat(df: pd.DataFrame, meta: Dict[str, int]) -> None:
    max_self_ns = float(df["self_ns"].max()) if len(df) else 0.0
    scale, unit = _unit_scale_ns(max_self_ns)
    print(
        f"{'%':>6} {'cum%':>8} {'self':>12} {'total':>12} "
        f"{'self['+unit+']':>12} {'total['+unit+']':>12}  symbol"
    )
    for r in df.itertuples(index=False):
        print(
            f"{r.percent:6.2f} {r.cum_percent:8.2f} "
            f"{int(r.self_cycles):12d} {int(r.total_cycles):12d} "
            f"{r.self_ns / scale:12.3f} {r.total_ns / scale:12.3f}  {r.symbol}"
        )

    for k in ("total_cycles", "total_ns"):
        if k in meta:
            print(f"{k}: {meta[k]}")
    """
         %     cum%         self        total    self[ms]   total[ms]  symbol
    100.00   100.00     80000018     80000743      80.000      80.001  Proc0
      0.00   100.00          720          720       0.001       0.001  memset
    total_cycles: 80000743
    total_ns: 80000743
    """


def maybe_plot(df: pd.DataFrame, path: str, title: str) -> None:
    try:
        import matplotlib
        matplotlib.use("Agg")
        import matplotlib.pyplot as plt
    except ImportError as e:
        raise RuntimeError(
            "matplotlib not available; install folded2pprof[summary] or skip --plot"
        ) from e

    labels = list(df["symbol"])[::-1]
    values = list(df["percent"])[::-1]

    fig_h = max(3.3, 0.33 * max(1, len(df)))
    fig, ax = plt.subplots(1, 1, figsize=(7.5, fig_h), tight_layout=True)
    bars = ax.barh(labels, values, color="#7ed3ab")
    ax.bar_label(bars, fmt="%.1f%%", padding=3)
    ax.set_xlabel("% of cycles (self)")
    ax.set_title(title)
    ax.margins(y=0.02)

    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    fig.savefig(path, dpi=150, bbox_inches="tight")
    plt.close(fig)
