"""Workflow nodes for the promotion graph."""

from gitpromote.workflow.nodes.commit_local import CommitLocal
from gitpromote.workflow.nodes.delegate_review import DelegateReview
from gitpromote.workflow.nodes.merge_source import MergeSource
from gitpromote.workflow.nodes.preflight import Preflight
from gitpromote.workflow.nodes.push_target import PushTarget
from gitpromote.workflow.nodes.resume_check import ResumeCheck
from gitpromote.workflow.nodes.summary import Summary
from gitpromote.workflow.nodes.switch_target import SwitchToTarget
from gitpromote.workflow.nodes.sync_source import SyncSourceBranch

__all__ = [
    "Preflight",
    "ResumeCheck",
    "CommitLocal",
    "SyncSourceBranch",
    "SwitchToTarget",
    "MergeSource",
    "PushTarget",
    "Summary",
    "DelegateReview",
]
