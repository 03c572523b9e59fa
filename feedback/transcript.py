from __future__ import annotations

from textwrap import dedent

from interview_session import InterviewSession

NO_ANSWER = "[No answer provided]"


def build_transcript(session: InterviewSession) -> str:  # INTERVIEWER/CANDIDATE blocks, one per question
    blocks = []
    for index, question in enumerate(session.questions):
        answer = session.answers[index] if index < len(session.answers) else ""
        blocks.append(f"INTERVIEWER: {question.question}\nCANDIDATE: {answer.strip() or NO_ANSWER}")
    return "\n\n".join(blocks)


def build_feedback_prompt(session: InterviewSession) -> str:  # Evaluation prompt for the feedback collaborator
    transcript = build_transcript(session)
    header = dedent(
        f"""
        You are evaluating an interview that just concluded. Do NOT summarize what the candidate said.
        Focus on: communication clarity, specific examples, confidence, and areas for improvement.

        INTERVIEW CONTEXT:
        - Role: {session.job_role}
        - Interviewer Style: {session.persona}
        - CV Summary: {session.cv_summary or 'Not provided'}
        """
    ).strip()
    footer = dedent(
        """
        Provide honest, constructive feedback in JSON format with:
        - score (0-100)
        - summary (2-3 sentences)
        - strengths (2-3 items)
        - weaknesses (2-3 items)
        - suggestions (2-3 actionable tips)
        - idealResponseTip (one specific tip for their weakest answer)
        """
    ).strip()
    return f"{header}\n\nTRANSCRIPT:\n{transcript}\n\n{footer}"


__all__ = ["NO_ANSWER", "build_feedback_prompt", "build_transcript"]
