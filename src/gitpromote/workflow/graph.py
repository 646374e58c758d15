"""Graph workflow definition."""

from pydantic_graph import Graph

from gitpromote.core.config import State
from gitpromote.core.log import logger


def create_workflow():
    """Create the promotion workflow graph.

    Preflight → ResumeCheck → CommitLocal → SyncSourceBranch →
        SwitchToTarget → MergeSource → PushTarget → Summary

    ResumeCheck may jump straight to PushTarget after finishing a
    merge on the target branch. Promotions to main go
    Preflight → DelegateReview instead.

    Returns:
        Graph workflow with State as state_type
    """
    logger.debug("Building workflow graph")

    # Node return hints are resolved against these locals
    from gitpromote.workflow.nodes.commit_local import CommitLocal
    from gitpromote.workflow.nodes.delegate_review import DelegateReview
    from gitpromote.workflow.nodes.merge_source import MergeSource
    from gitpromote.workflow.nodes.preflight import Preflight
    from gitpromote.workflow.nodes.push_target import PushTarget
    from gitpromote.workflow.nodes.resume_check import ResumeCheck
    from gitpromote.workflow.nodes.summary import Summary
    from gitpromote.workflow.nodes.switch_target import SwitchToTarget
    from gitpromote.workflow.nodes.sync_source import SyncSourceBranch

    workflow = Graph(
        nodes=(
            Preflight,
            ResumeCheck,
            CommitLocal,
            SyncSourceBranch,
            SwitchToTarget,
            MergeSource,
            PushTarget,
            Summary,
            DelegateReview,
        ),
        state_type=State,
    )

    return workflow
