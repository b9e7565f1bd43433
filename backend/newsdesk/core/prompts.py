"""
Centralized prompt text and fixed replies.
"""

import json
from typing import List, Optional, Dict, Any


class PromptManager:
    """
    Centralized manager for all LLM prompts.
    """

    # --- Document (RAG) answers ---
    DOCUMENT_SYSTEM_INSTRUCTION = (
        "You are an assistant answering questions about a specific context, "
        "but you can also handle simple polite conversation."
    )

    NOT_IN_DOCUMENT = (
        "I'm sorry, that information is not in the provided document. "
        "We can only discuss the opened PDF."
    )

    NO_CONTEXT = "No context available."

    DOCUMENT_ANSWER = """
    You are a helpful assistant. A user is asking questions about a specific news report or a user-uploaded PDF.
    Use the following context to answer the user's question.

    CONTEXT:
    ---
    {context}
    ---

    USER'S QUESTION:
    {question}

    IMPORTANT:
    - If the user's question is *directly related* to the context, answer it using *only* the context.
    - If the context is '{no_context}', politely state that you cannot answer questions about the PDF as its content could not be read.
    - If the user's question is a simple greeting, farewell, or polite message (like "hello", "thank you", "bye"), just respond politely as a normal AI assistant. Do NOT say "I'm sorry...".
    - If the question is *not* related to the context and is *not* a simple greeting, politely say "{not_in_document}"
    """

    # --- News report ---
    NEWS_SYSTEM_INSTRUCTION = (
        "You are a helpful news analyst. "
        "Format your output as a detailed, multi-paragraph report."
    )

    NO_NEWS_REPORT = (
        "# No News Found\n"
        "I'm sorry, but I couldn't find any recent top headlines for India."
    )

    NEWS_REPORT = """
    You are a professional news analyst. A user asked for "top news in India".
    Here are the top {count} articles I found:
    {articles_json}
    Please provide a very detailed, multi-page report. Format your response *exactly* like the example below, using markdown-style headers.
    For each article, you MUST write a 4-5 paragraph "Detailed Elaboration".
    # AI News Report: Top Headlines from India
    (Start with a brief, one-paragraph overview...)
    ## 1: {first_title}
    (Source: {first_source})
    #### Detailed Elaboration
    (Write 4-5 paragraphs here...)
    ## 2: {second_title}
    (Source: {second_source})
    #### Detailed Elaboration
    (Write 4-5 paragraphs here...)
    (Continue for all {count} articles...)
    """

    @classmethod
    def document_answer(cls, context: Optional[str], question: str) -> str:
        return cls.DOCUMENT_ANSWER.format(
            context=context or cls.NO_CONTEXT,
            question=question,
            no_context=cls.NO_CONTEXT,
            not_in_document=cls.NOT_IN_DOCUMENT,
        )

    @classmethod
    def news_report(cls, articles: List[Dict[str, Any]]) -> str:
        def field(index: int, key: str, default: str) -> str:
            if index < len(articles) and articles[index].get(key):
                return articles[index][key]
            return default

        return cls.NEWS_REPORT.format(
            count=len(articles),
            articles_json=json.dumps(articles, indent=2, ensure_ascii=False),
            first_title=field(0, "title", "First Article"),
            first_source=field(0, "source", "N/A"),
            second_title=field(1, "title", "Second Article"),
            second_source=field(1, "source", "N/A"),
        )


class Replies:
    """Fixed AI replies that never reach the LLM."""

    REPORT_PROMPT = (
        "There's so much news! I can generate a detailed PDF report for you. "
        "Shall I proceed?"
    )
    REPORT_LOADING = "Great! I will start generating the report. Please wait..."
    REPORT_DECLINED = "Okay, no problem. What else can I help you with?"
    CLOSE_PROMPT = "You're welcome! Shall I close the PDF preview now?"
    CLOSE = "Okay, closing the preview. The context is now cleared."
    KEEP_DISCUSSING = "No problem! We can keep discussing the report."
    EMPTY_CHAT = "Hello! How can I help you?"

    REPORT_READY = "Your detailed news report is ready! You can view it here."
    PDF_UPLOADED = "PDF Uploaded: {filename}. Here is the preview."

    LOGIN_REQUIRED = (
        "This feature is available for registered users. "
        "Please log in or create an account to continue."
    )
    LOGIN_REQUIRED_PDF = (
        "This feature is available for registered users. Please log in to continue."
    )

    APOLOGY = "Sorry, I couldn't get a response right now. Please try again."
