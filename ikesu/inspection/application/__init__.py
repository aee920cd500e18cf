"""Application layer for the inspection engine."""

from ikesu.inspection.application.check_use_case import CheckUseCase
from ikesu.inspection.application.diagnostics import render_provider_listing
from ikesu.inspection.application.gap_detector import MetricGapDetector
from ikesu.inspection.application.report_batcher import ReportBatcher
from ikesu.inspection.application.rule_evaluator import RuleEvaluator

__all__ = ["CheckUseCase", "MetricGapDetector", "ReportBatcher", "RuleEvaluator", "render_provider_listing"]
