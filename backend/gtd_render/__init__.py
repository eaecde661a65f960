"""
ГТД 报关单打印引擎 - 后端核心模块

模块结构：
- config/     配置加载（运行期参数 + 坐标表）
- models/     数据模型定义（报关单/商品/坐标落点）
- doc_gen/    文档生成（坐标表/文本清洗/字段绘制/分页/组装/校准）
"""

__version__ = "0.1.0"
