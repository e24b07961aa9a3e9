def test_imports():
    import planner.core.config  # noqa: F401
    import planner.engine.financial_engine  # noqa: F401
    import planner.engine.tracking  # noqa: F401
    import planner.tools.engine_tools  # noqa: F401
    import planner.utils.timeline  # noqa: F401
