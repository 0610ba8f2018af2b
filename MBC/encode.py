import argparse, os
from bitview import DEFAULT_BITS_PER_BYTE, SUPPORTED_WIDTHS
from bitstream import save_message
from morse_codec import encode

def main(argv=None):
    ap = argparse.ArgumentParser(description="Encode text as a Morse bitstream (.mrse)")
    src = ap.add_mutually_exclusive_group(required=True)
    src.add_argument("--input", help="path to text file (read as bytes)")
    src.add_argument("--text", help="text given on the command line")
    ap.add_argument("--output", required=True, help="path to .mrse")
    ap.add_argument("--bits-per-byte", type=int, default=DEFAULT_BITS_PER_BYTE,
                    choices=sorted(SUPPORTED_WIDTHS), help="buffer unit width (default 8)")
    args = ap.parse_args(argv)

    if args.input is not None:
        with open(args.input, "rb") as f:
            text = f.read()
    else:
        text = args.text.encode("ascii", errors="replace")

    units = encode(text, bits_per_byte=args.bits_per_byte)

    os.makedirs(os.path.dirname(args.output) or ".", exist_ok=True)
    save_message(args.output, units, args.bits_per_byte)

    nbits = units.size * args.bits_per_byte
    print(f"[encode] wrote {args.output}")
    print(f"[encode] chars={len(text)}, units={units.size} x {args.bits_per_byte}b, bits={nbits}")
    if text:
        print(f"[encode] bits/char={nbits / len(text):.2f}")

if __name__ == "__main__":
    main()
