import argparse
import numpy as np
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from bitstream import load_message
from bitview import BitView

def keying_waveform(units: np.ndarray, bits_per_byte: int) -> np.ndarray:
    """0/1 key state per bit time, trailing fill zeros dropped."""
    bits = BitView(units, bits_per_byte).to_bits()
    on = np.flatnonzero(bits)
    if on.size == 0:
        return bits[:0]
    return bits[:on[-1] + 1]

def main(argv=None):
    ap = argparse.ArgumentParser(description="Plot the keying waveform of a .mrse file")
    ap.add_argument("--input", required=True, help="path to .mrse")
    ap.add_argument("--output", required=True, help="path to output image (.png)")
    ap.add_argument("--width", type=float, default=12.0, help="figure width in inches")
    args = ap.parse_args(argv)

    h, units = load_message(args.input)
    key = keying_waveform(units, h["bits_per_byte"])
    t = np.arange(key.size + 1)

    plt.figure(figsize=(args.width, 1.8))
    plt.step(t, np.append(key, 0), where="post", linewidth=1.0)
    plt.ylim(-0.2, 1.2)
    plt.yticks([0, 1], ["off", "on"])
    plt.xlabel("bit time")
    plt.title(f"{args.input} ({key.size} bits)", fontsize=9)
    plt.tight_layout()
    plt.savefig(args.output, dpi=200)
    plt.close()
    print(f"[plot] wrote {args.output}")

if __name__ == "__main__":
    main()
