"""
Shorts Workflow – turns Reddit threads into a short-form video production package.

Use from project root:
  from shorts_workflow.application.pipeline import WorkflowPipeline
  from shorts_workflow.adapters import default_adapters
  pipeline = WorkflowPipeline(**default_adapters())
  workflow = pipeline.run({"subreddit": "AskReddit", "timeframe": "week", "storyCount": 2,
                           "duration": 45, "voiceProfile": "narrator", "includeBroll": True})

To plug in another generator or post source, implement the ports
(IFieldGenerator, IPostSource) and inject them.
"""

__version__ = "0.2.0"
