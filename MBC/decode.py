import argparse, os
from bitstream import load_message
from morse_codec import MorseDecodeError, decode

def main(argv=None):
    ap = argparse.ArgumentParser(description="Decode a Morse bitstream (.mrse) back to text")
    ap.add_argument("--input", required=True, help="path to .mrse")
    ap.add_argument("--output", help="path to output text file (default: stdout)")
    args = ap.parse_args(argv)

    h, units = load_message(args.input)
    try:
        text = decode(units, bits_per_byte=h["bits_per_byte"])
    except MorseDecodeError as e:
        raise SystemExit(f"[decode] {args.input}: {e} [{e.kind}]")

    if args.output is None:
        print(text)
        return

    os.makedirs(os.path.dirname(args.output) or ".", exist_ok=True)
    with open(args.output, "w", encoding="ascii") as f:
        f.write(text + "\n")
    print(f"[decode] wrote {args.output} chars={len(text)} units={h['n_units']} x {h['bits_per_byte']}b")

if __name__ == "__main__":
    main()
