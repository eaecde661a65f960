"""
PDF页数统计（核对输出的报关单：1张主页 + N张续页）。
"""

from __future__ import annotations

import argparse
from pathlib import Path

from gtd_render.doc_gen import count_pdf_pages


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--pdf", required=True)
    ap.add_argument("--items", type=int, default=None, help="可选：商品数，用于核对期望页数")
    ap.add_argument("--capacity", type=int, default=3, help="每张续页的商品数（默认3）")
    args = ap.parse_args()

    n = count_pdf_pages(Path(args.pdf))
    print(n)
    if args.items is not None:
        from gtd_render.doc_gen.pagination import continuation_page_count

        expected = 1 + continuation_page_count(args.items, args.capacity)
        if n != expected:
            raise SystemExit(f"页数不符: 实际 {n}, 期望 {expected}")


if __name__ == "__main__":
    main()
