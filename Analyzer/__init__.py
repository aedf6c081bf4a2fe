from Analyzer.Features import FEATURE_RULES, analyze_features, build_summary

__all__ = ["FEATURE_RULES", "analyze_features", "build_summary"]
