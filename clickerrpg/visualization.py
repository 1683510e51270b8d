from __future__ import annotations

from clickerrpg.report import SimulationReport


def plot_simulation(
    report: SimulationReport,
    output_path: str | None = None,
) -> None:
    """Generate a 4-panel matplotlib visualization of simulation results.

    Requires matplotlib (optional dependency).
    """
    try:
        import matplotlib.pyplot as plt
    except ImportError:
        raise ImportError(
            "matplotlib is required for visualization. "
            "Install with: pip install clickerrpg[viz]"
        )

    fig, axes = plt.subplots(2, 2, figsize=(14, 10))
    fig.suptitle(
        f"Clicker RPG Simulation: {report.strategy_description}",
        fontsize=14,
    )

    # 1. Gold over time (log scale)
    ax1 = axes[0][0]
    series = report.series("gold")
    if series:
        times, values = zip(*series)
        ax1.plot(times, [max(v, 1) for v in values], label="gold")
        ax1.set_yscale("log")
    ax1.set_xlabel("Time (s)")
    ax1.set_ylabel("Gold")
    ax1.set_title("Gold")
    ax1.grid(True, alpha=0.3)

    # 2. Enemy level, with prestiges marked
    ax2 = axes[0][1]
    series = report.series("level")
    if series:
        times, levels = zip(*series)
        ax2.step(times, levels, where="post")
    for p in report.prestiges:
        ax2.axvline(p.time, color="purple", linestyle=":", alpha=0.6)
    ax2.set_xlabel("Time (s)")
    ax2.set_ylabel("Level")
    ax2.set_title("Enemy Level")
    ax2.grid(True, alpha=0.3)

    # 3. Helper DPS and click damage
    ax3 = axes[1][0]
    for attr, label in (("dps", "Helper DPS"), ("click_damage", "Click damage")):
        series = report.series(attr)
        if series:
            times, values = zip(*series)
            ax3.plot(times, values, label=label)
    ax3.set_xlabel("Time (s)")
    ax3.set_title("Damage Output")
    ax3.legend(fontsize=8)
    ax3.grid(True, alpha=0.3)

    # 4. Purchase timeline
    ax4 = axes[1][1]
    if report.purchases:
        times = [p.time for p in report.purchases]
        kinds = [p.kind for p in report.purchases]
        kind_types = sorted(set(kinds))
        y_map = {k: i for i, k in enumerate(kind_types)}
        ax4.scatter(times, [y_map[k] for k in kinds], s=10, alpha=0.6)
        ax4.set_yticks(range(len(kind_types)))
        ax4.set_yticklabels(kind_types, fontsize=7)
        ax4.set_xlabel("Time (s)")
        ax4.set_title("Purchase Timeline")
        ax4.grid(True, alpha=0.3)

    plt.tight_layout()

    if output_path:
        plt.savefig(output_path, dpi=150)
    else:
        plt.show()
