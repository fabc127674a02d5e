import matplotlib
# Force non-interactive backend in headless containers
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from pathlib import Path


def save_rtt_series(rtts, target, outpath):
    Path(outpath).parent.mkdir(parents=True, exist_ok=True)
    plt.figure()
    plt.plot(range(len(rtts)), rtts)
    plt.title(target)
    plt.xlabel("sample")
    plt.ylabel("rtt_ms")
    plt.tight_layout()
    plt.savefig(outpath)
    plt.close()
    return str(outpath)


def save_store_plots(store, outdir):
    paths = []
    for target in store.targets:
        name = target.replace(":", "_").replace("/", "_")
        paths.append(save_rtt_series(store.window_rtts(target), target,
                                     Path(outdir) / f"rtt-{name}.png"))
    return paths
