"""
LangGraph Workflow Definition
Defines the chat pipeline's execution flow
"""

from typing import Literal

from langgraph.graph import END, StateGraph

from src.services.cases.responder import ASSESSMENT, INTAKE, select_stage

from .nodes import PipelineNodes
from .state import PipelineServices, PipelineState


def route_stage(state: PipelineState) -> Literal["intake", "assessment"]:
    """Route on the freshly extracted record's completeness."""
    facts = state.get("case_facts")
    if facts is None:
        return INTAKE
    return select_stage(facts)


def create_pipeline_graph(services: PipelineServices) -> StateGraph:
    """
    Create the chat pipeline workflow

    Strictly sequential: every stage consumes the previous stage's output.
    """
    nodes = PipelineNodes(services)

    workflow = StateGraph(PipelineState)

    workflow.add_node("rewrite", nodes.rewrite)
    workflow.add_node("expand", nodes.expand)
    workflow.add_node("retrieve", nodes.retrieve)
    workflow.add_node("extract", nodes.extract)
    workflow.add_node("persist", nodes.persist)
    workflow.add_node("intake", nodes.respond_intake)
    workflow.add_node("assessment", nodes.respond_assessment)

    workflow.set_entry_point("rewrite")

    workflow.add_edge("rewrite", "expand")
    workflow.add_edge("expand", "retrieve")
    workflow.add_edge("retrieve", "extract")
    workflow.add_edge("extract", "persist")

    # Conditional Edge: Persist -> (Intake | Assessment)
    workflow.add_conditional_edges("persist", route_stage, {INTAKE: "intake", ASSESSMENT: "assessment"})

    workflow.add_edge("intake", END)
    workflow.add_edge("assessment", END)

    return workflow


def build_pipeline_graph(services: PipelineServices):
    """Compile the workflow for the given services."""
    return create_pipeline_graph(services).compile()
