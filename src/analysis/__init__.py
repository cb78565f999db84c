from src.analysis.metrics import LineMetrics, StationSummary, compute_line_metrics, format_report

__all__ = ["LineMetrics", "StationSummary", "compute_line_metrics", "format_report"]
