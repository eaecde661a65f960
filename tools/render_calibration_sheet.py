"""
生成坐标标定页（主页 + 坐标网格 + 字段边框 + 示例数据）。

用法：
    python tools/render_calibration_sheet.py --out calibration.pdf
    python tools/render_calibration_sheet.py --out td1.pdf --background
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from gtd_render.config import reload_config
from gtd_render.doc_gen import DocumentAssembler
from gtd_render.models import RenderOptions


def main() -> int:
    parser = argparse.ArgumentParser(description="Render a GTD calibration sheet.")
    parser.add_argument("--out", required=True, help="输出PDF路径")
    parser.add_argument(
        "--config",
        default="config/gtd_runtime.yaml",
        help="运行期配置（默认：config/gtd_runtime.yaml）",
    )
    parser.add_argument(
        "--background",
        action="store_true",
        help="叠加空白表格模板（模板缺失时退回程序化骨架）",
    )
    parser.add_argument("--no-borders", action="store_true", help="不画字段边框")
    args = parser.parse_args()

    config = reload_config(args.config)
    logging.basicConfig(
        level=config.logging.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    options = RenderOptions(
        use_background_image=args.background,
        show_debug_grid=True,
        show_field_borders=not args.no_borders,
    )
    pdf_bytes = DocumentAssembler(config=config).render_calibration_sheet(options)

    out = Path(args.out)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_bytes(pdf_bytes)
    print(f"标定页已生成: {out} ({len(pdf_bytes)} bytes)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
