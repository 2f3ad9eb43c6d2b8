"""Compiled LangGraph: text -> (uploaded image | generated image) -> END."""
from langgraph.graph import END, START, StateGraph

from medisocial.services.capabilities import GenerativeCapability
from medisocial.workflow.state import PostWorkflowState


def create_post_graph(capability: GenerativeCapability):
    """Build and compile the post pipeline against a generative capability."""

    async def compose_text(state: PostWorkflowState) -> dict:
        content = await capability.generate_text(state["request"])
        return {"content": content}

    async def attach_upload(state: PostWorkflowState) -> dict:
        return {"image_url": state["request"].uploaded_image, "is_custom_image": True}

    async def render_image(state: PostWorkflowState) -> dict:
        request = state["request"]
        image_url = await capability.generate_image(state["content"].image_prompt_description, request.format)
        return {"image_url": image_url, "is_custom_image": False}

    def pick_image_source(state: PostWorkflowState) -> str:
        return "attach_upload" if state["request"].uploaded_image else "render_image"

    builder = StateGraph(PostWorkflowState)

    builder.add_node("compose_text", compose_text)
    builder.add_node("attach_upload", attach_upload)
    builder.add_node("render_image", render_image)

    builder.add_edge(START, "compose_text")
    builder.add_conditional_edges("compose_text", pick_image_source, ["attach_upload", "render_image"])
    builder.add_edge("attach_upload", END)
    builder.add_edge("render_image", END)

    return builder.compile()
