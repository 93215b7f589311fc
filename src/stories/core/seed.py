"""
Example and test stories used by ``stories init`` and ``stories test``.

Each seeding function writes one or more complete story trees and returns
the ids of the stories it created. A story whose id already exists is
skipped with its whole tree.
"""

import logging

from stories.core.db.models import Activity, Step, Story
from stories.core.db.store import StoriesDatabase
from stories.core.exceptions import DuplicateRecordError

logger = logging.getLogger(__name__)


def seed_story(
    db: StoriesDatabase,
    story: Story,
    activities: list[Activity],
    steps: list[Step],
) -> bool:
    """
    Write one story tree.

    Returns:
        True if created, False if the story already existed
    """
    if db.get_story(story.id) is not None:
        logger.info("Story %s already exists, skipping", story.id)
        return False

    try:
        db.create_story(story)
        for activity in activities:
            db.create_activity(activity)
        for step in steps:
            db.create_step(step)
    except DuplicateRecordError as e:
        # Activity or step ids can collide with another story's records
        logger.warning("Partial seed of %s: %s", story.id, e)
        return False
    return True


def _step(
    step_id: str,
    activity_id: str,
    order_index: int,
    prompt: str,
    input_request: str,
    state_update_logic: str,
    outcome_check: str,
) -> Step:
    return Step(
        id=step_id,
        activity_id=activity_id,
        order_index=order_index,
        prompt=prompt,
        input_request=input_request,
        state_update_logic=state_update_logic,
        outcome_check=outcome_check,
    )


def create_example_stories(db: StoriesDatabase) -> list[str]:
    """Seed the website-builder and code-audit example stories."""
    created: list[str] = []

    website_builder = Story(
        id="website-builder",
        title="Website Builder",
        description="Build a complete website with frontend, styling, and testing",
        initial_state={
            "project_name": "",
            "framework": "react",
            "styling": "tailwind",
            "testing": True,
        },
        expected_outcomes={
            "frontend_created": True,
            "styles_applied": True,
            "tests_written": True,
            "build_successful": True,
        },
        completion_criteria="Website is fully functional with passing tests and successful build",
    )
    website_activities = [
        Activity(
            id="scaffold-frontend",
            story_id="website-builder",
            title="Scaffold Frontend",
            description="Create the basic structure and components for the website",
            instructions="Generate a clean, modern website structure using React and TypeScript",
            prompt_template="generate-ui",
            state={"components_created": False, "routing_setup": False},
            expected_outcome="Frontend structure created with main components and routing",
        ),
        Activity(
            id="apply-styles",
            story_id="website-builder",
            title="Apply Styles",
            description="Style the website using Tailwind CSS",
            instructions="Apply responsive, modern styling to all components",
            prompt_template="generate-ui",
            state={"styles_applied": False, "responsive_design": False},
            expected_outcome="Website styled with Tailwind CSS and responsive design",
        ),
        Activity(
            id="write-tests",
            story_id="website-builder",
            title="Write Tests",
            description="Create comprehensive tests for all components",
            instructions="Write unit and integration tests using modern testing frameworks",
            prompt_template="write-tests",
            state={"unit_tests": False, "integration_tests": False},
            expected_outcome="All components have comprehensive test coverage",
        ),
    ]
    website_steps = [
        _step(
            "create-app-structure",
            "scaffold-frontend",
            1,
            "Create the main App component with routing setup",
            "Specify the main pages/routes needed",
            '{"components_created": true}',
            "App component exists and renders correctly",
        ),
        _step(
            "create-components",
            "scaffold-frontend",
            2,
            "Create reusable UI components (Header, Footer, etc.)",
            "List of components needed",
            '{"routing_setup": true}',
            "All basic components created and importable",
        ),
        _step(
            "setup-tailwind",
            "apply-styles",
            1,
            "Configure Tailwind CSS and apply base styles",
            "Design system preferences (colors, fonts, etc.)",
            '{"styles_applied": true}',
            "Tailwind is configured and base styles applied",
        ),
        _step(
            "responsive-design",
            "apply-styles",
            2,
            "Make all components responsive across device sizes",
            "Breakpoint specifications",
            '{"responsive_design": true}',
            "Website looks good on mobile, tablet, and desktop",
        ),
        _step(
            "setup-testing",
            "write-tests",
            1,
            "Set up testing framework and write unit tests",
            "Testing framework preference (Jest, Vitest, etc.)",
            '{"unit_tests": true}',
            "Unit tests pass for all components",
        ),
        _step(
            "integration-tests",
            "write-tests",
            2,
            "Write integration tests for user workflows",
            "Key user journeys to test",
            '{"integration_tests": true}',
            "Integration tests cover main user flows",
        ),
    ]
    if seed_story(db, website_builder, website_activities, website_steps):
        created.append(website_builder.id)

    code_audit = Story(
        id="code-audit",
        title="Code Audit",
        description="Perform comprehensive audit of existing codebase",
        initial_state={"codebase_path": "", "audit_scope": "full", "fix_issues": True},
        expected_outcomes={
            "issues_identified": True,
            "report_generated": True,
            "critical_fixes_applied": True,
        },
        completion_criteria="Codebase audited with report generated and critical issues fixed",
    )
    audit_activities = [
        Activity(
            id="analyze-code",
            story_id="code-audit",
            title="Analyze Code",
            description="Scan codebase for issues, vulnerabilities, and improvements",
            instructions="Perform static analysis and identify potential problems",
            prompt_template="lint-code",
            state={"static_analysis": False, "security_scan": False},
            expected_outcome="Complete analysis of codebase with issues catalogued",
        )
    ]
    audit_steps = [
        _step(
            "static-analysis",
            "analyze-code",
            1,
            "Run static analysis tools to identify code quality issues",
            "Specify analysis tools and rules to use",
            '{"static_analysis": true}',
            "Static analysis completed with results catalogued",
        ),
        _step(
            "security-scan",
            "analyze-code",
            2,
            "Scan for security vulnerabilities and best practices",
            "Security standards to check against",
            '{"security_scan": true}',
            "Security vulnerabilities identified and prioritized",
        ),
    ]
    if seed_story(db, code_audit, audit_activities, audit_steps):
        created.append(code_audit.id)

    return created


def create_simple_test_story(db: StoriesDatabase) -> list[str]:
    """Seed ``hello-claude``: one activity, two quick steps."""
    story = Story(
        id="hello-claude",
        title="Hello Claude Test",
        description="Simple test to verify Claude CLI integration is working",
        initial_state={"test_started": False, "claude_responded": False},
        expected_outcomes={"successful_communication": True, "response_received": True},
        completion_criteria="Claude responds successfully to a simple greeting",
    )
    activity = Activity(
        id="test-greeting",
        story_id="hello-claude",
        title="Test Greeting",
        description="Send a simple greeting to Claude and get a response",
        instructions="Test basic communication with Claude CLI",
        prompt_template="greeting",
        state={"greeting_sent": False, "response_received": False},
        expected_outcome="Claude responds with a friendly greeting",
    )
    steps = [
        _step(
            "say-hello",
            "test-greeting",
            1,
            'Hello Claude! Please respond with just "Hello! Integration working!" '
            "to confirm the Stories CLI is connected.",
            "No input needed - just testing connection",
            '{"greeting_sent": true}',
            "Claude responds with the requested message",
        ),
        _step(
            "ask-question",
            "test-greeting",
            2,
            "What is 2 + 2? Please respond with just the number.",
            "Simple math question for quick response",
            '{"response_received": true, "claude_responded": true}',
            "Claude provides the correct answer: 4",
        ),
    ]
    return [story.id] if seed_story(db, story, [activity], steps) else []


def create_quick_test(db: StoriesDatabase) -> list[str]:
    """Seed ``quick-test``: a single one-step story."""
    story = Story(
        id="quick-test",
        title="Quick Claude Test",
        description="Single step test for instant Claude response",
        initial_state={},
        expected_outcomes={"response_received": True},
        completion_criteria="Claude responds quickly",
    )
    activity = Activity(
        id="instant-test",
        story_id="quick-test",
        title="Instant Test",
        description="One quick question to Claude",
        instructions="Get instant response from Claude",
        prompt_template="quick-question",
        state={},
        expected_outcome="Quick response received",
    )
    step = _step(
        "ask-quick",
        "instant-test",
        1,
        'Say "Working!" if you can see this.',
        "Quick test",
        '{"done": true}',
        "Claude says Working!",
    )
    return [story.id] if seed_story(db, story, [activity], [step]) else []
