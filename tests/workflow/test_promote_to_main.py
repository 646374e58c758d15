"""promote-to-main hands the promotion over to code review."""

from conftest import SOURCE

from gitpromote.command.promote import PromoteToMainCommand

COMPARE_URL = f"https://github.com/acme/widgets/compare/main...{SOURCE}"


async def test_declining_direct_merge_prints_review_url(
    fake_git, make_state, prompter, console, printed
):
    code = await PromoteToMainCommand().run_workflow(
        make_state(), prompter=prompter, console=console, transport=fake_git
    )

    assert code == 0
    assert prompter.asked == ["confirm_direct_merge"]
    assert COMPARE_URL in printed()
    assert fake_git.mutations == []


async def test_accepting_direct_merge_still_merges_nothing(
    fake_git, make_state, prompter, console, printed
):
    prompter.direct_merge = True

    code = await PromoteToMainCommand().run_workflow(
        make_state(), prompter=prompter, console=console, transport=fake_git
    )

    assert code == 0
    assert "not performed" in printed()
    assert fake_git.mutations == []


async def test_main_missing_on_remote_fails(
    fake_git, make_state, prompter, console
):
    fake_git.replace("branch", "-r", output=f"origin/{SOURCE}\norigin/test\n")

    code = await PromoteToMainCommand().run_workflow(
        make_state(), prompter=prompter, console=console, transport=fake_git
    )

    assert code == 1
    assert prompter.asked == []


async def test_run_state_records_main_as_target(
    fake_git, make_state, prompter, console
):
    state = make_state()

    await PromoteToMainCommand().run_workflow(
        state, prompter=prompter, console=console, transport=fake_git
    )

    run = state.runtime.promotion
    assert run.target_branch == "main"
    assert run.original_branch == SOURCE
    assert run.status == "complete"
