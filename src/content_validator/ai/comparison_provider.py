"""
Comparison Provider for dual-LLM validation.

Runs the two-round workflow:
1. Round 1: both providers score the content independently, in parallel
2. Round 2: each provider re-scores with the other's Round-1 verdict
   embedded in its prompt, again in parallel

Round 2 starts only after both Round-1 calls have resolved (genuine or
stub). Every call goes through invoke_with_fallback(), so a round always
resolves within the per-call timeout budget.

Stateless Architecture:
- Each run() is independent; providers are injected, nothing is shared
- Peer context is explicit in the Round-2 prompt
"""

import asyncio
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from content_validator.ai.base_provider import BaseProvider
from content_validator.ai.fallback import FallbackPolicy, ProviderVerdict, invoke_with_fallback
from content_validator.ai.stub_provider import StubProvider
from content_validator.config.constants import SLOT_A, SLOT_B
from content_validator.config.logging_config import get_logger
from content_validator.core.models import ProviderAudit, RoundResults, RubricSpec
from content_validator.core.workflow_state import ValidationPhase, ValidationState
from content_validator.prompts.builder import build_cross_validation_prompt
from content_validator.prompts.templates import SYSTEM_MESSAGE

logger = get_logger(__name__)

SLOTS = (SLOT_A, SLOT_B)
PEER_SLOT = {SLOT_A: SLOT_B, SLOT_B: SLOT_A}


def advance_phase(state: ValidationState, phase: ValidationPhase) -> ValidationState:
    """Move to the next phase and log the transition."""
    new_state = state.with_phase(phase)
    logger.info(f"Validation phase: {state.phase.value} -> {phase.value}")
    return new_state


@dataclass
class TwoRoundOutcome:
    """Verdicts of both rounds keyed by slot, plus the workflow state."""
    round1: Dict[str, ProviderVerdict]
    round2: Dict[str, ProviderVerdict]
    state: ValidationState
    round2_prompts: Dict[str, str] = field(default_factory=dict)

    def round_results(self, round_number: int) -> RoundResults:
        verdicts = self.round1 if round_number == 1 else self.round2
        return RoundResults(
            provider_a=verdicts[SLOT_A].output,
            provider_b=verdicts[SLOT_B].output,
        )

    def audit(self) -> List[ProviderAudit]:
        return [
            verdicts[slot].to_audit()
            for verdicts in (self.round1, self.round2)
            for slot in SLOTS
        ]

    def token_usage(self) -> Dict[str, Dict[str, int]]:
        """Prompt and completion tokens per slot, both rounds together."""
        usage = {}
        for slot in SLOTS:
            verdicts = (self.round1[slot], self.round2[slot])
            prompt_tokens = sum(v.prompt_tokens for v in verdicts)
            completion_tokens = sum(v.completion_tokens for v in verdicts)
            usage[slot] = {
                "prompt_tokens": prompt_tokens,
                "completion_tokens": completion_tokens,
                "total_tokens": prompt_tokens + completion_tokens,
            }
        return usage


class ComparisonProvider:
    """
    Wrapper that runs two providers through both validation rounds.

    Usage:
        comparison = ComparisonProvider([
            ("openai", OpenAIProvider(...)),
            ("gemini", GeminiProvider(...)),
        ])
        outcome = await comparison.run(prompt, content, rubric)
    """

    def __init__(
        self,
        providers: List[Tuple[str, BaseProvider]],
        stub: Optional[StubProvider] = None,
        policy: Optional[FallbackPolicy] = None,
        system_prompt: str = SYSTEM_MESSAGE,
        progress_callback: Optional[Callable] = None,
    ):
        """
        Initialize comparison provider.

        Args:
            providers: Exactly two (name, provider) tuples, slot A first
                       Example: [("openai", OpenAIProvider(...)), ("gemini", GeminiProvider(...))]
            stub: Stub used for substitution (default: StubProvider())
            policy: Timeout/retry policy (default: FallbackPolicy())
            system_prompt: System message sent with every call
            progress_callback: Optional callback for progress updates
                               callback(event_type, data), sync or async
        """
        if len(providers) != 2:
            raise ValueError("ComparisonProvider requires exactly 2 providers")

        self.providers = providers
        self.stub = stub or StubProvider()
        self.policy = policy or FallbackPolicy()
        self.system_prompt = system_prompt
        self.progress_callback = progress_callback

    async def _notify_progress(self, event_type: str, data: dict):
        """Call the progress callback; a failing callback never breaks a run."""
        if self.progress_callback is None:
            return
        try:
            result = self.progress_callback(event_type, data)
            if asyncio.iscoroutine(result):
                await result
        except Exception as e:
            logger.warning(f"Progress callback failed on {event_type}: {e}")

    async def _run_round(
        self,
        round_number: int,
        prompts: Dict[str, str],
        content: str,
        rubric: RubricSpec,
    ) -> Dict[str, ProviderVerdict]:
        """Call both providers in parallel and wait for both to resolve."""
        await self._notify_progress("round_start", {"round": round_number})

        async def call_slot(slot: str, provider: BaseProvider) -> ProviderVerdict:
            verdict = await invoke_with_fallback(
                slot=slot,
                round_number=round_number,
                provider=provider,
                prompt=prompts[slot],
                system_prompt=self.system_prompt,
                content=content,
                rubric=rubric,
                stub=self.stub,
                policy=self.policy,
            )
            await self._notify_progress("provider_complete", {
                "round": round_number,
                "slot": slot,
                "provider": provider.name,
                "genuine": verdict.genuine,
                "score": verdict.output.overall_score,
                "error_kind": verdict.error_kind,
            })
            return verdict

        tasks = [call_slot(slot, provider) for slot, (_, provider) in zip(SLOTS, self.providers)]
        verdicts = await asyncio.gather(*tasks)

        await self._notify_progress("round_complete", {"round": round_number})
        return {v.slot: v for v in verdicts}

    def _cross_validation_prompts(
        self,
        base_prompt: str,
        round1: Dict[str, ProviderVerdict],
    ) -> Dict[str, str]:
        prompts = {}
        for slot in SLOTS:
            peer = round1[PEER_SLOT[slot]]
            label = f"{peer.output.provider.value} ({peer.provider_name})" if peer.provider_name else peer.output.provider.value
            prompts[slot] = build_cross_validation_prompt(base_prompt, label, peer.output)
        return prompts

    async def run(self, base_prompt: str, content: str, rubric: RubricSpec) -> TwoRoundOutcome:
        """
        Run both rounds.

        Args:
            base_prompt: Rendered Round-1 prompt
            content: Preprocessed content (for stub substitution)
            rubric: Active rubric

        Returns:
            TwoRoundOutcome in phase ROUND2_DONE
        """
        state = ValidationState()

        state = advance_phase(state, ValidationPhase.ROUND1_PENDING)
        round1 = await self._run_round(1, {slot: base_prompt for slot in SLOTS}, content, rubric)
        state = advance_phase(state, ValidationPhase.ROUND1_DONE)

        round2_prompts = self._cross_validation_prompts(base_prompt, round1)

        state = advance_phase(state, ValidationPhase.ROUND2_PENDING)
        round2 = await self._run_round(2, round2_prompts, content, rubric)
        state = advance_phase(state, ValidationPhase.ROUND2_DONE)

        for verdict in list(round1.values()) + list(round2.values()):
            if not verdict.genuine:
                state = state.with_error(
                    verdict.error_kind or "Unknown",
                    verdict.error or "stub substituted",
                    {"slot": verdict.slot, "round": verdict.round},
                )

        return TwoRoundOutcome(
            round1=round1,
            round2=round2,
            state=state,
            round2_prompts=round2_prompts,
        )
