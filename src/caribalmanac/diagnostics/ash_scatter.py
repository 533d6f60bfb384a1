#!/usr/bin/env python3
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Callable, Dict, List, Optional, Tuple

import argparse

import caribalmanac
from caribalmanac.core.time import day_of_year


def _need_numpy():
    try:
        import numpy as np
        return np
    except ImportError as e:
        raise RuntimeError('Need numpy. Install: pip install "caribalmanac[diagnostics]"') from e


def _need_matplotlib():
    try:
        import matplotlib
        matplotlib.use("Agg")
        import matplotlib.pyplot as plt
        return plt
    except ImportError as e:
        raise RuntimeError('Need matplotlib. Install: pip install "caribalmanac[diagnostics]"') from e


def rolling_median(np, y, win: int = 11):
    """Centered rolling median with edge padding."""
    if win < 3:
        return y.astype(float)
    if win % 2 == 0:
        win += 1
    k = win // 2
    ypad = np.pad(y, (k, k), mode="edge")
    out = np.empty_like(y, dtype=float)
    for i in range(len(y)):
        out[i] = float(np.median(ypad[i : i + win]))
    return out


@dataclass(frozen=True)
class Style:
    label: str
    color: str
    marker: str
    size: float = 12.0


SERIES: Dict[str, Tuple[Callable[[int], date], Style]] = {
    "ash-wednesday": (caribalmanac.compute_ash_wednesday, Style("Ash Wednesday", "tab:purple", "o")),
    "easter-sunday": (caribalmanac.compute_easter_sunday, Style("Easter Sunday", "tab:orange", "s", size=10)),
}


def build_series(np, fn: Callable[[int], date], start_year: int, end_year: int):
    years = np.arange(start_year, end_year + 1, dtype=int)
    y = np.empty_like(years, dtype=float)
    for i, Y in enumerate(years):
        y[i] = float(day_of_year(fn(int(Y))))
    return years, y


def summary(np, y) -> Dict[str, float]:
    return {
        "min": float(np.min(y)),
        "max": float(np.max(y)),
        "mean": float(np.mean(y)),
        "std": float(np.std(y)),
    }


def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser(description="Scatter plot of Ash Wednesday / Easter day-of-year across years.")
    p.add_argument("--start-year", type=int, default=1900)
    p.add_argument("--end-year", type=int, default=2100)
    p.add_argument("--series", action="append", choices=sorted(SERIES), default=None,
                   help="Series to plot (repeatable, default: all).")
    p.add_argument("--show-trend", action="store_true")
    p.add_argument("--trend-win", type=int, default=11, help="Rolling median window (odd recommended).")
    p.add_argument("--outbase", default="ash_wednesday_scatter", help="Output base name (writes .png)")
    args = p.parse_args(argv)

    if args.end_year < args.start_year:
        raise SystemExit("--end-year must be >= --start-year")

    np = _need_numpy()
    plt = _need_matplotlib()

    plt.rcParams.update({
        "font.size": 10,
        "axes.labelsize": 11,
        "axes.titlesize": 12,
        "legend.fontsize": 10,
        "axes.linewidth": 0.8,
    })

    fig, ax = plt.subplots(figsize=(9.2, 4.8), constrained_layout=True)
    ax.set_axisbelow(True)
    ax.grid(True, which="major", color="0.88", linewidth=0.7)
    ax.set_xlabel("Gregorian year")
    ax.set_ylabel("Day-of-year (Jan 1 = 1)")
    ax.set_title("Moveable feasts by year")

    for name in args.series or sorted(SERIES):
        fn, st = SERIES[name]
        x, y = build_series(np, fn, args.start_year, args.end_year)
        ax.scatter(x, y, s=st.size, marker=st.marker, c=st.color, linewidths=0.0, alpha=0.5, label=st.label)
        if args.show_trend:
            ax.plot(x, rolling_median(np, y, win=int(args.trend_win)), color=st.color, linewidth=1.8)
        s = summary(np, y)
        print(f"{st.label:14s} doy min={s['min']:.0f} max={s['max']:.0f} mean={s['mean']:.2f} std={s['std']:.2f}")

    ax.legend(loc="center left", bbox_to_anchor=(1.02, 0.5), frameon=False)

    fig.savefig(args.outbase + ".png", dpi=200)
    plt.close(fig)
    print(f"Saved: {args.outbase}.png")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
