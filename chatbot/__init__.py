from chatbot.chat import ChatSession, RAGChatbot, build_messages

__all__ = ["ChatSession", "RAGChatbot", "build_messages"]
