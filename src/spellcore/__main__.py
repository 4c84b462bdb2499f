from __future__ import annotations
import argparse, json
from dataclasses import asdict
from . import config as CFG
from .engine import Engine
from .errors import StoreError


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Symmetric-delete spelling correction CLI (Engine-backed)")
    g = p.add_mutually_exclusive_group(required=True)
    g.add_argument("--build", action="store_true", help="Build dictionary from --dict")
    g.add_argument("--load", action="store_true", help="Load existing dictionary from --db")

    p.add_argument("--dict", nargs="+", default=[], help="Frequency dictionary files or folders of .txt")
    p.add_argument("--db", default=None, help='Store DSN: "sqlite:///path" or "memory://"')
    p.add_argument("--term-index", type=int, default=0, help="Column holding the term")
    p.add_argument("--count-index", type=int, default=1, help="Column holding the count")
    p.add_argument("--sep", default=None, help="Column separator (default: whitespace)")
    p.add_argument("--edit-distance", type=int, default=CFG.MAX_EDIT_DISTANCE, help="Max edit distance of the index")
    p.add_argument("--prefix-length", type=int, default=CFG.PREFIX_LENGTH)
    p.add_argument("--threshold", type=int, default=CFG.COUNT_THRESHOLD, help="Count needed before a term is indexed")
    p.add_argument("--verbosity", choices=["top", "closest", "all"], default=CFG.DEFAULT_VERBOSITY)
    p.add_argument("--max-distance", type=int, default=None, help="Per-query bound (<= --edit-distance)")
    p.add_argument("--repl", action="store_true", help="Interactive loop after init")
    p.add_argument("--q", default=None, help="Single query to run once")
    p.add_argument("--json", action="store_true", help="Emit JSON rows")
    p.add_argument("--verbose", action="store_true")

    args = p.parse_args(argv)
    if args.build and not args.dict:
        p.error("--build requires --dict")
    if args.load and not args.db:
        p.error("--load requires --db")

    eng = Engine(
        max_edit_distance=args.edit_distance,
        prefix_length=args.prefix_length,
        count_threshold=args.threshold,
    )
    try:
        try:
            if args.build:
                eng.build(
                    args.dict,
                    db_dsn=args.db,
                    term_index=args.term_index,
                    count_index=args.count_index,
                    separator=args.sep,
                    verbose=args.verbose,
                )
            else:
                eng.load(db_dsn=args.db, verbose=args.verbose)
        except (ValueError, OSError, StoreError) as exc:
            p.error(str(exc))

        def run_query(q: str):
            rows = eng.lookup(q, args.verbosity, args.max_distance)
            if args.json:
                print(json.dumps([asdict(r) for r in rows], ensure_ascii=False, indent=2))
            else:
                if not rows:
                    print("(no suggestions)"); return
                print("#  Dist  Frequency     Term")
                for i, r in enumerate(rows, 1):
                    print(f"{i:<2} {r.distance:<5} {r.frequency:<13} {r.term}")

        if args.q is not None:
            run_query(args.q)

        if args.repl:
            print("Type a word (empty line to exit).")
            while True:
                try:
                    q = input("> ").strip()
                except (EOFError, KeyboardInterrupt):
                    break
                if not q:
                    break
                run_query(q)

        return 0
    finally:
        eng.shutdown()

if __name__ == "__main__":
    raise SystemExit(main())
